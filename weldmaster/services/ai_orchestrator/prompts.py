"""
Prompt templates for weld pass analysis.
No external dependencies - simple string formatting with validation.
"""

from dataclasses import dataclass


@dataclass
class PromptTemplate:
    """Simple template with variable injection"""
    system: str
    user: str

    def format(self, **kwargs) -> tuple[str, str]:
        """Format both system and user prompts with provided variables"""
        try:
            system_msg = self.system.format(**kwargs)
            user_msg = self.user.format(**kwargs)
            return system_msg, user_msg
        except KeyError as e:
            raise ValueError(f"Missing required template variable: {e}")


WELD_ANALYSIS = PromptTemplate(
    system="""You are a senior welding engineer reviewing a single manual weld pass.

Comment on whether the heat input is plausible for the process and what it
implies (penetration, distortion, HAZ toughness). Keep it short: a few
sentences, plain language, no disclaimers.""",
    user=(
        "Weld analysis: {process_label}, {voltage} V, {current} A, {length} mm, "
        "{elapsed_time:.1f} s. Heat input: {heat_input:.3f} kJ/mm. Short expert opinion."
    ),
)


def build_analysis_prompt(
    process_label: str,
    voltage: float,
    current: float,
    length: float,
    elapsed_time: float,
    heat_input: float,
) -> tuple[str, str]:
    """
    Build the (system, user) prompt pair for a weld pass.

    Output depends only on the arguments, so the same pass always yields the
    same prompt.
    """
    return WELD_ANALYSIS.format(
        process_label=process_label,
        voltage=float(voltage),
        current=float(current),
        length=float(length),
        elapsed_time=elapsed_time,
        heat_input=heat_input,
    )
