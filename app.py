from __future__ import annotations
import asyncio
from pathlib import Path
import sys
import streamlit as st
BASE_DIR = Path(__file__).parent.resolve()
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

from resume_analyzer.components.score_gauge import ScoreGauge
from resume_analyzer.config import Settings, configure_logging, load_settings
from resume_analyzer.orchestrator import AnalysisOrchestrator
from resume_analyzer.state import ResumeDocument
from dotenv import load_dotenv


def _orchestrator(settings: Settings | None = None) -> AnalysisOrchestrator:
    if "orchestrator" not in st.session_state:
        st.session_state.orchestrator = AnalysisOrchestrator.from_settings(settings or load_settings())
        st.session_state.uploader_nonce = 0
    return st.session_state.orchestrator


def _uploader_key() -> str:
    return f"resume_file_{st.session_state.uploader_nonce}"


def _on_text_change() -> None:
    orchestrator = _orchestrator()
    had_document = orchestrator.state.input.document is not None
    orchestrator.set_text(st.session_state.resume_text)
    if had_document and orchestrator.state.input.document is None:
        # Streamlit cannot clear a file_uploader; a fresh key gives an empty one.
        st.session_state.uploader_nonce += 1


def _on_file_change() -> None:
    orchestrator = _orchestrator()
    uploaded = st.session_state.get(_uploader_key())
    if uploaded is None:
        orchestrator.set_document(None)
        return
    orchestrator.set_document(ResumeDocument(
        filename=uploaded.name,
        content=uploaded.getvalue(),
        content_type=uploaded.type or "application/pdf",
    ))
    st.session_state.resume_text = ""


# Button callbacks run before the script, so the buttons below are already
# drawn disabled in the run that sends the request.
def _on_analyze_click() -> None:
    st.session_state.analysis_request = _orchestrator().prepare_submit()


def _on_export_click() -> None:
    st.session_state.export_result = _orchestrator().prepare_export()


def _show_notice(orchestrator: AnalysisOrchestrator) -> None:
    notice = orchestrator.state.notice
    if notice is not None:
        show = {"error": st.error, "warning": st.warning}.get(notice.level, st.info)
        show(notice.message)


def _render_gauge(orchestrator: AnalysisOrchestrator) -> None:
    result = orchestrator.state.result
    placeholder = st.empty()
    gauge = ScoreGauge(on_frame=lambda g: placeholder.markdown(g.render_svg(), unsafe_allow_html=True))
    # Animate once per result; later reruns redraw the final frame.
    if st.session_state.get("gauge_shown_for") is result:
        gauge.show(result.ats_score)
        return
    asyncio.run(gauge.animate(result.ats_score))
    st.session_state.gauge_shown_for = result


def main():
    load_dotenv()
    settings = load_settings()
    configure_logging(settings)
    st.set_page_config(page_title="AI Resume Analyzer", page_icon="📄", layout="centered")
    st.title("AI Resume Analyzer")
    st.caption("Smart ATS evaluation powered by AI")

    orchestrator = _orchestrator(settings)
    state = orchestrator.state

    st.text_area(
        "Resume text",
        key="resume_text",
        placeholder="Paste your resume here...",
        height=200,
        on_change=_on_text_change,
    )
    st.markdown("<div style='text-align:center;color:#6b7280;'>— OR —</div>", unsafe_allow_html=True)
    st.file_uploader(
        "Upload resume (PDF)",
        type=["pdf"],
        accept_multiple_files=False,
        key=_uploader_key(),
        on_change=_on_file_change,
    )

    st.button(
        "Analyze Resume" if orchestrator.can_submit else "Analyzing...",
        key="analyze",
        disabled=not orchestrator.can_submit,
        on_click=_on_analyze_click,
        use_container_width=True,
    )
    request = st.session_state.pop("analysis_request", None)
    if request is not None:
        with st.spinner("Analyzing..."):
            asyncio.run(orchestrator.complete_submit(request))
        st.rerun()

    if state.result is None:
        _show_notice(orchestrator)
        return

    _render_gauge(orchestrator)

    st.button(
        "Download Detailed PDF Report",
        key="export",
        disabled=not orchestrator.can_export,
        on_click=_on_export_click,
        use_container_width=True,
    )
    export_result = st.session_state.pop("export_result", None)
    if export_result is not None:
        with st.spinner("Preparing report..."):
            asyncio.run(orchestrator.complete_export(export_result))
        st.rerun()

    _show_notice(orchestrator)
    if state.report is not None:
        st.download_button(
            label=f"Save {state.report.filename}",
            data=state.report.content,
            file_name=state.report.filename,
            mime=state.report.media_type,
        )

    left, right = st.columns(2)
    for i, panel in enumerate(orchestrator.panels()):
        with (left if i % 2 == 0 else right):
            st.markdown(panel.render_markdown())


if __name__ == "__main__":
    main()
