from __future__ import annotations
import re
from typing import List, Tuple
from pydantic import BaseModel, ConfigDict
from ..state import AnalysisResult

EMPTY_MESSAGE = "No major issues detected."

# Display order of the four feedback categories: (title, result field).
CATEGORIES: List[Tuple[str, str]] = [
    ("Strengths", "strengths"),
    ("Weaknesses", "weaknesses"),
    ("Missing Skills", "missing_skills"),
    ("Improvement Suggestions", "improvement_suggestions"),
]


class FeedbackPanel(BaseModel):
    """Titled, order-preserving list of findings. Items are shown exactly as given."""
    model_config = ConfigDict(frozen=True)

    title: str
    items: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.items

    def render_markdown(self) -> str:
        lines = [f"#### {_escape_md(self.title)}", ""]
        if self.is_empty:
            lines.append(f"*{EMPTY_MESSAGE}*")
        else:
            lines.extend(f"- {_escape_md(item)}" for item in self.items)
        return "\n".join(lines)


_MD_SPECIAL = ("\\", "*", "_", "`", "#", "[", "]", "<", ">", "$", "~", "|")
_LEADING_BULLET = re.compile(r"^([-+])")
_LEADING_ORDINAL = re.compile(r"^(\d+)([.)])")


def _escape_md(text: str) -> str:
    # One bullet per item; no nested lists, headings, links or LaTeX ($...$ in st.markdown).
    text = " ".join(text.splitlines()).strip()
    for ch in _MD_SPECIAL:
        text = text.replace(ch, "\\" + ch)
    text = _LEADING_BULLET.sub(r"\\\1", text)
    return _LEADING_ORDINAL.sub(r"\1\\\2", text)


def panels_for(result: AnalysisResult) -> List[FeedbackPanel]:
    return [FeedbackPanel(title=title, items=getattr(result, field)) for title, field in CATEGORIES]
