"""
Fixed texts shown on the significant change check run.

All of it is assembled once from the configuration when the app is created
and passed to the check run handlers, so deployments can adjust links and the
review checklist without touching the handlers.
"""

from pydantic import BaseModel, ConfigDict

from sig_change.config import Config
from sig_change.github.models import (
    ActionIdentifier,
    CheckRunAction,
    CheckRunOutput,
)

QUESTION = "Is this a significant change?"


class Messages(BaseModel):
    model_config = ConfigDict(frozen=True)

    check_name: str
    question: CheckRunOutput
    question_actions: tuple[CheckRunAction, ...]
    sia_required: CheckRunOutput
    sia_actions: tuple[CheckRunAction, ...]

    @classmethod
    def from_config(cls, config: Config) -> "Messages":
        return cls(
            check_name=config.CHECK_RUN_NAME,
            question=CheckRunOutput(
                title=config.CHECK_RUN_NAME,
                summary=question_summary(config.REVIEW_CHECKLIST),
                text=f"Learn more at: {config.LEARN_MORE_URL}",
            ),
            question_actions=(
                CheckRunAction(
                    label="Yes",
                    description="This is a significant change.",
                    identifier=ActionIdentifier.is_sig_change,
                ),
                CheckRunAction(
                    label="No",
                    description="This is NOT a significant change.",
                    identifier=ActionIdentifier.not_sig_change,
                ),
            ),
            sia_required=CheckRunOutput(
                title="Security Impact Analysis Required",
                summary=(
                    "Please provide a Security Impact Analysis.\n\n"
                    f"{config.SIA_FORM_URL}\n"
                ),
                text=f"Sample SIA here: {config.SIA_FORM_URL}",
            ),
            sia_actions=(
                CheckRunAction(
                    label="SIA Complete",
                    description="Successfully submitted.",
                    identifier=ActionIdentifier.not_sig_change,
                ),
            ),
        )


def question_summary(checklist: list[str]) -> str:
    if not checklist:
        return QUESTION

    lines = [QUESTION, "", "Consider the following before answering:", ""]
    lines += [f"{i}. {item}" for i, item in enumerate(checklist, start=1)]
    return "\n".join(lines)
