"""PDF Study Assistant main entry point."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import streamlit as st

from config import (
    ACCENT,
    ACCENT_HOVER,
    BG_PAGE,
    CARD_BG,
    ERROR_BG,
    LOG_FORMAT,
    PAGE_ICON,
    PAGE_SUBTITLE,
    PAGE_TITLE,
    TAB_LABELS,
    TEXT,
    TEXT_MUTED,
    ConfigurationError,
    log_level,
    require_api_key,
)
from services.artifact_controller import ArtifactController
from services.artifact_types import AppState, ArtifactKind, GenerationView, SummaryLength
from services.llm_service import LLMProcessor
from services.markdown_renderer import render_html
from services.quiz_grading import QuizSession, is_correct
from utils.file_utils import export_bytes, export_file_name, export_text

LOGGER = logging.getLogger("pdf_assistant.app")

PLACEHOLDERS = {
    ArtifactKind.SUMMARY: "Select a summary length and click generate.",
    ArtifactKind.STRATEGY: "Generate a strategy to get started.",
    ArtifactKind.QUIZ: "Generate a quiz to test your knowledge.",
}
CARD_TITLES = {
    ArtifactKind.SUMMARY: "✨ AI Generated Summary",
    ArtifactKind.STRATEGY: "🗺️ 4-Week Strategy Plan",
}


def _configure_logging() -> None:
    if st.session_state.get("logging_configured"):
        return
    logging.basicConfig(level=log_level(), format=LOG_FORMAT)
    st.session_state["logging_configured"] = True


def _inject_css() -> None:
    st.markdown(
        f"""
        <style>
        .stApp {{ background: {BG_PAGE}; color: {TEXT}; }}
        .app-title {{
            font-size: 2.5rem;
            font-weight: 800;
            text-align: center;
            color: {ACCENT};
            margin-bottom: 0.25rem;
        }}
        .app-subtitle {{ text-align: center; color: {TEXT_MUTED}; margin-bottom: 2rem; }}
        .result-card {{
            background: {CARD_BG};
            border-radius: 12px;
            padding: 1.25rem 1.5rem;
            min-height: 200px;
        }}
        .result-card ul {{ padding-left: 1.5rem; }}
        .placeholder {{ color: {TEXT_MUTED}; text-align: center; padding: 4rem 0; }}
        .error-box {{
            background: {ERROR_BG};
            border: 1px solid #B91C1C;
            color: #FCA5A5;
            border-radius: 8px;
            padding: 0.75rem 1rem;
            text-align: center;
        }}
        .stButton > button[kind="primary"] {{ background: {ACCENT}; border-color: {ACCENT}; }}
        .stButton > button[kind="primary"]:hover {{ background: {ACCENT_HOVER}; }}
        </style>
        """,
        unsafe_allow_html=True,
    )


def _run(coro: Any) -> Any:
    return asyncio.run(coro)


def _controller() -> ArtifactController:
    ctrl = st.session_state.get("controller")
    if ctrl is None:
        ctrl = ArtifactController(LLMProcessor(api_key=st.session_state["api_key"]))
        st.session_state["controller"] = ctrl
    return ctrl


def _bump(key: str) -> None:
    st.session_state[key] = int(st.session_state.get(key, 0)) + 1


def _generate(ctrl: ArtifactController, kind: ArtifactKind, **options: Any) -> None:
    label = TAB_LABELS[kind.value].lower()
    with st.spinner(f"Generating {label}..."):
        _run(ctrl.generate(kind, options or None))
    if kind is ArtifactKind.QUIZ:
        _bump("quiz_nonce")


# ---------- Upload ----------

def _render_upload(ctrl: ArtifactController) -> None:
    uploaded = st.file_uploader(
        "Drag and drop your PDF here",
        type=["pdf"],
        key=f"pdf_uploader_{st.session_state.get('uploader_nonce', 0)}",
        help="Max file size: 50MB",
    )
    if uploaded is not None:
        signature = (uploaded.name, uploaded.size)
        if st.session_state.get("last_upload_signature") != signature:
            st.session_state["last_upload_signature"] = signature
            with st.spinner("Parsing PDF document..."):
                _run(ctrl.load_document(uploaded.name, uploaded.type or "", uploaded.getvalue()))
            st.rerun()
    if ctrl.upload_error:
        st.markdown(f'<div class="error-box">{ctrl.upload_error}</div>', unsafe_allow_html=True)


# ---------- Results ----------

def _render_export_actions(view: GenerationView) -> None:
    text = export_text(view.kind, view.content)
    c1, c2 = st.columns([3, 1])
    with c1:
        with st.expander("Copy as plain text"):
            st.code(text, language=None)
    with c2:
        st.download_button(
            "Download .txt",
            data=export_bytes(view.kind, view.content),
            file_name=export_file_name(view.kind),
            mime="text/plain",
            key=f"download_{view.kind.value}",
            use_container_width=True,
        )


def _render_result_card(view: GenerationView) -> None:
    st.markdown(f"#### {CARD_TITLES[view.kind]}")
    if view.last_error:
        st.markdown(f'<div class="error-box">{view.last_error}</div>', unsafe_allow_html=True)
        return
    if not view.has_content:
        st.markdown(f'<div class="placeholder">{PLACEHOLDERS[view.kind]}</div>', unsafe_allow_html=True)
        return
    _render_export_actions(view)
    st.markdown(f'<div class="result-card">{render_html(str(view.content))}</div>', unsafe_allow_html=True)


def _render_summary_tab(ctrl: ArtifactController) -> None:
    c1, c2 = st.columns([3, 1])
    with c1:
        length = st.radio(
            "Length",
            options=[s.value for s in SummaryLength],
            index=1,
            horizontal=True,
            format_func=str.capitalize,
            key="summary_length",
        )
    with c2:
        if st.button("Regenerate", key="summary_regenerate", type="primary", use_container_width=True):
            _generate(ctrl, ArtifactKind.SUMMARY, summary_length=length)
            st.rerun()
    _render_result_card(ctrl.view(ArtifactKind.SUMMARY))


def _render_strategy_tab(ctrl: ArtifactController) -> None:
    view = ctrl.view(ArtifactKind.STRATEGY)
    if not ctrl.needs_generation(ArtifactKind.STRATEGY):
        if st.button("Regenerate", key="strategy_regenerate", type="primary"):
            _generate(ctrl, ArtifactKind.STRATEGY)
            st.rerun()
    _render_result_card(view)


def _record_answer(session: QuizSession, index: int, widget_key: str) -> None:
    value = st.session_state.get(widget_key)
    if value is not None:
        session.select(index, str(value))


def _render_quiz_question(session: QuizSession, index: int, nonce: int) -> None:
    q = session.questions[index]
    widget_key = f"quiz_{nonce}_{index}"
    answer = session.selected_answers.get(index)
    st.markdown(f"**{index + 1}. {q.question}**")
    if q.has_choices:
        options = list(q.options or ())
        st.radio(
            q.question,
            options=options,
            index=options.index(answer) if answer in options else None,
            key=widget_key,
            label_visibility="collapsed",
            disabled=session.submitted,
            on_change=_record_answer,
            args=(session, index, widget_key),
        )
    else:
        st.text_input(
            q.question,
            placeholder="Your answer...",
            key=widget_key,
            label_visibility="collapsed",
            disabled=session.submitted,
            on_change=_record_answer,
            args=(session, index, widget_key),
        )
    if session.submitted:
        if is_correct(answer, q.answer):
            st.success(f"Correct: {q.answer}")
        else:
            st.error(f"Correct Answer: {q.answer}")


def _render_quiz_tab(ctrl: ArtifactController) -> None:
    view = ctrl.view(ArtifactKind.QUIZ)
    session = ctrl.quiz_session
    if view.last_error:
        st.markdown(f'<div class="error-box">{view.last_error}</div>', unsafe_allow_html=True)
    elif session is None or not session.questions:
        st.markdown(f'<div class="placeholder">{PLACEHOLDERS[ArtifactKind.QUIZ]}</div>', unsafe_allow_html=True)
    else:
        st.markdown("#### Knowledge Check Quiz")
        total = len(session.questions)
        if session.submitted:
            st.info(f"Your Score: {session.score} / {total}")
            st.caption("Excellent work!" if session.score == total else "Review the answers below and try again!")
        nonce = int(st.session_state.get("quiz_nonce", 0))
        for i in range(total):
            with st.container(border=True):
                _render_quiz_question(session, i, nonce)
        c1, c2 = st.columns(2)
        with c1:
            if not session.submitted:
                if st.button("Submit Quiz", type="primary", disabled=not session.can_submit, use_container_width=True):
                    session.submit()
                    st.rerun()
            elif st.button("Try Again", use_container_width=True):
                session.try_again()
                _bump("quiz_nonce")
                st.rerun()
        with c2:
            if st.button("New Quiz", key="quiz_regenerate", help="Get a new set of questions", use_container_width=True):
                _generate(ctrl, ArtifactKind.QUIZ)
                st.rerun()
        with st.expander("Quiz as plain text"):
            st.code(export_text(ArtifactKind.QUIZ, view.content), language=None)
        return
    if st.button("New Quiz", key="quiz_retry", type="primary"):
        _generate(ctrl, ArtifactKind.QUIZ)
        st.rerun()


def _render_results(ctrl: ArtifactController) -> None:
    if ctrl.app_state is AppState.READY and ctrl.needs_generation(ArtifactKind.SUMMARY):
        _generate(ctrl, ArtifactKind.SUMMARY, summary_length=SummaryLength.MEDIUM.value)

    c1, c2 = st.columns([4, 1])
    with c1:
        st.markdown(f"📄 **{ctrl.document.name if ctrl.document else 'document'}**")
    with c2:
        if st.button("New File", help="Analyze another file", use_container_width=True):
            ctrl.reset()
            st.session_state.pop("last_upload_signature", None)
            _bump("uploader_nonce")
            st.rerun()

    tab = st.radio(
        "Tabs",
        options=[k.value for k in ArtifactKind],
        format_func=lambda v: TAB_LABELS[v],
        horizontal=True,
        key="active_tab",
        label_visibility="collapsed",
    )
    kind = ArtifactKind(tab)
    if kind is not ArtifactKind.SUMMARY and ctrl.needs_generation(kind):
        _generate(ctrl, kind)

    st.divider()
    if kind is ArtifactKind.SUMMARY:
        _render_summary_tab(ctrl)
    elif kind is ArtifactKind.STRATEGY:
        _render_strategy_tab(ctrl)
    else:
        _render_quiz_tab(ctrl)


def main() -> None:
    st.set_page_config(page_title=PAGE_TITLE, page_icon=PAGE_ICON, layout="centered")
    _configure_logging()
    try:
        st.session_state["api_key"] = require_api_key()
    except ConfigurationError as e:
        LOGGER.error("startup aborted: %s", e)
        st.error(str(e))
        st.stop()
    _inject_css()
    st.markdown(f'<div class="app-title">{PAGE_TITLE}</div>', unsafe_allow_html=True)
    st.markdown(f'<div class="app-subtitle">{PAGE_SUBTITLE}</div>', unsafe_allow_html=True)

    ctrl = _controller()
    state = ctrl.app_state
    if state in (AppState.IDLE, AppState.ERROR) and ctrl.document is None:
        _render_upload(ctrl)
    elif state is AppState.PARSING:
        with st.spinner("Parsing PDF document..."):
            st.empty()
    else:
        _render_results(ctrl)
    st.caption("Powered by OpenAI")


if __name__ == "__main__":
    main()
