"""
Assessment Generator Prompt Templates

Contains the instruction and response schema used to generate
original MSCEIT-style assessment items for one branch.
"""

from typing import Any

from prepmsceit.models.branch import BRANCH_GUIDANCE, Branch


class GeneratorPrompts:
    """
    Prompt templates for AI item generation.

    Key principles:
    - Structurally similar to professional EI tests
    - Completely original scenarios
    - Consensus scoring on every option
    """

    ITEMS_PER_REQUEST = 3

    SYSTEM_CONTEXT = """You are an expert psychometrician specializing in Emotional Intelligence (EI) based on the MSCEIT framework.
Generate {count} original, unique, high-quality assessment items for the EI branch: "{branch}".

The items must be structurally similar to professional EI tests but use completely original scenarios.

For "Perceiving Emotions", use Type "Image" (I will supply a placeholder image, just describe the emotion to look for).
For "Understanding Emotions", focus on emotional blends, transitions, and definitions.
For "Managing Emotions", present a social or personal scenario and ask for the most effective strategy.
For "Using Emotions", ask how a specific mood aids a specific cognitive task.

Branch focus: {guidance}

Provide "consensus scoring" where the best answer is 1.0, and others are weighted 0.0 to 0.9 based on plausibility.
"""

    RESPONSE_SCHEMA: dict[str, Any] = {
        "type": "ARRAY",
        "items": {
            "type": "OBJECT",
            "properties": {
                "scenario": {"type": "STRING"},
                "type": {"type": "STRING", "enum": ["MC", "Likert", "Image"]},
                "options": {
                    "type": "ARRAY",
                    "items": {
                        "type": "OBJECT",
                        "properties": {
                            "id": {"type": "STRING"},
                            "text": {"type": "STRING"},
                            "score": {
                                "type": "NUMBER",
                                "description": "Between 0.0 and 1.0",
                            },
                        },
                        "required": ["id", "text", "score"],
                    },
                },
                "explanation": {"type": "STRING"},
            },
            "required": ["scenario", "type", "options"],
        },
    }

    def system_instruction(self, branch: Branch) -> str:
        """Instruction for generating items on one branch."""
        return self.SYSTEM_CONTEXT.format(
            count=self.ITEMS_PER_REQUEST,
            branch=branch.value,
            guidance=BRANCH_GUIDANCE[branch],
        )

    def user_prompt(self, branch: Branch) -> str:
        return f"Generate {self.ITEMS_PER_REQUEST} questions for branch: {branch.value}"
