"""
prepMSCEIT - Emotional Intelligence Test Preparation

Backend for the learner dashboard, the landing page lead capture and the
admin functions (invitations, question import) of the prepMSCEIT platform.
"""

__version__ = "0.1.0"
__author__ = "prepMSCEIT Team"
