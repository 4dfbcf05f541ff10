from enum import Enum
from textwrap import dedent
from types import MappingProxyType
from typing import Mapping, Optional, Union


class Period(str, Enum):
    THREE_MONTHS = "3months"
    FOUR_MONTHS = "4months"
    SIX_MONTHS = "6months"


DEFAULT_PERIOD = Period.THREE_MONTHS

PERIOD_LABELS: Mapping[Period, str] = MappingProxyType(
    {
        Period.THREE_MONTHS: "3 months later",
        Period.FOUR_MONTHS: "4 months later",
        Period.SIX_MONTHS: "6 months later",
    }
)


def _build_transformation_prompt(months: int, body_fat: str, definition: str, focus: str) -> str:
    return dedent(
        f"""\
        This is a photo of a person at a personal training gym.
        Please edit this image to show how this person would naturally look after {months} months of:
        - Regular personal training (3 times per week)
        - Balanced diet with proper nutrition
        - Adequate sleep and recovery

        Guidelines for the transformation:
        - Reduce body fat by approximately {body_fat} visibly
        - Show {definition} muscle definition improvement
        - Keep the transformation realistic and achievable
        - Maintain the same pose, clothing, background, and lighting
        - The face and identity must remain exactly the same
        - Do NOT make extreme changes - the result should be believable as a {months}-month progress
        - Focus on: {focus}
        """
    )


TRANSFORMATION_PROMPTS: Mapping[Period, str] = MappingProxyType(
    {
        Period.THREE_MONTHS: _build_transformation_prompt(
            3,
            "3-5%",
            "subtle",
            "slightly slimmer waist, more toned arms, improved posture",
        ),
        Period.FOUR_MONTHS: _build_transformation_prompt(
            4,
            "5-7%",
            "moderate",
            "noticeably slimmer waist, toned arms and shoulders, improved overall physique",
        ),
        Period.SIX_MONTHS: _build_transformation_prompt(
            6,
            "7-10%",
            "clear",
            "significantly slimmer waist, well-defined arms and shoulders, "
            "visible core definition, improved overall body composition",
        ),
    }
)


def resolve_period(value: Optional[Union[str, Period]]) -> Period:
    """Map a raw form value onto a supported period, falling back to the default."""
    if isinstance(value, Period):
        return value
    if not value:
        return DEFAULT_PERIOD
    try:
        return Period(value.strip())
    except ValueError:
        return DEFAULT_PERIOD


def get_transformation_prompt(period: Optional[Union[str, Period]]) -> str:
    return TRANSFORMATION_PROMPTS[resolve_period(period)]
