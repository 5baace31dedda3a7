"""
CPAT Trainer - Practitioner training journey

Streamlit application walking a learner through the safety acknowledgment,
six gated training modules with assessments, and the completion certificate.

Usage:
    streamlit run app.py
"""

import time

import streamlit as st

from cpattrainer.classroom import (
    Navigator,
    ProgressStore,
    SAFETY_CONTENT_VERSION,
    SqliteStorage,
    estimate_total_duration,
    load_curriculum,
)
from cpattrainer.config import configure_logging, load_settings
from cpattrainer.schemas import SAFETY_GATE_ID, ModuleStatus


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

st.set_page_config(
    page_title="CPAT Trainer",
    page_icon="🌈",
    layout="wide",
    initial_sidebar_state="expanded",
)

STATUS_INDICATORS = {
    ModuleStatus.COMPLETED: "✓",
    ModuleStatus.CURRENT: "→",
    ModuleStatus.UPCOMING: "○",
    ModuleStatus.LOCKED: "◌",
}


# -----------------------------------------------------------------------------
# Session State Initialization
# -----------------------------------------------------------------------------

def init_session_state():
    """Create the curriculum, store and navigator once per browser session."""
    if "navigator" not in st.session_state:
        settings = load_settings()
        configure_logging(settings.log_level)
        curriculum = load_curriculum(settings.curriculum_path)
        store = ProgressStore(
            curriculum,
            storage=SqliteStorage(settings.progress_db),
            user_agent=settings.user_agent,
        )
        st.session_state.navigator = Navigator(curriculum, store)

    if "view" not in st.session_state:
        st.session_state.view = "welcome"  # welcome, safety, journey, module, certificate

    if "module_id" not in st.session_state:
        st.session_state.module_id = None

    if "module_opened_at" not in st.session_state:
        st.session_state.module_opened_at = None

    if "section_index" not in st.session_state:
        st.session_state.section_index = 0  # == len(sections) once on the assessment


def go(view: str):
    st.session_state.view = view
    st.rerun()


def flush_module_time():
    """Credit time since the module was opened to that module."""
    module_id = st.session_state.module_id
    opened_at = st.session_state.module_opened_at
    if module_id and opened_at:
        elapsed_ms = int((time.monotonic() - opened_at) * 1000)
        st.session_state.navigator.record_time(module_id, max(0, elapsed_ms))
        st.session_state.module_opened_at = time.monotonic()


# -----------------------------------------------------------------------------
# Sidebar
# -----------------------------------------------------------------------------

def render_sidebar():
    nav = st.session_state.navigator
    stats = nav.get_progress_summary()

    st.sidebar.title("🌈 CPAT Trainer")
    st.sidebar.markdown(
        f"**Progress:** {stats['completed']}/{stats['total_modules']} modules "
        f"({stats['completion_percent']}%)"
    )
    st.sidebar.progress(stats['completion_percent'] / 100)
    st.sidebar.caption(f"Estimated total time: {estimate_total_duration(nav.curriculum)}")

    st.sidebar.divider()
    if st.sidebar.button("Training journey", use_container_width=True):
        flush_module_time()
        go("journey" if stats["safety_acknowledged"] else "safety")

    if st.sidebar.button("Reset progress", use_container_width=True):
        nav.store.reset_progress()
        st.session_state.module_id = None
        go("welcome")


# -----------------------------------------------------------------------------
# Views
# -----------------------------------------------------------------------------

def render_welcome_view():
    nav = st.session_state.navigator
    st.title("CPAT Practitioner Training")
    st.markdown(
        f"{nav.total_modules} modules, about {estimate_total_duration(nav.curriculum)}. "
        "Complete every module to earn your certificate."
    )
    if st.button("Begin training", type="primary"):
        nav.store.start_journey()
        go("journey" if nav.store.record.safety_acknowledged else "safety")


def render_safety_view():
    nav = st.session_state.navigator
    st.title("Safety Acknowledgment")
    st.warning(
        "Light-based sessions are contraindicated for people with epilepsy or a "
        "seizure history. Screen every client and stop a session at the first "
        "sign of discomfort."
    )
    st.caption(f"Safety content version {SAFETY_CONTENT_VERSION}")
    agreed = st.checkbox("I have read and understood the safety information")
    if st.button("Acknowledge and continue", type="primary", disabled=not agreed):
        nav.store.acknowledge_safety()
        go("journey")


def render_journey_view():
    nav = st.session_state.navigator
    if not nav.get_progress_summary()["safety_acknowledged"]:
        go("safety")
    st.title("Training Journey")

    for entry in nav.get_journey():
        module = entry.module
        indicator = STATUS_INDICATORS[entry.status]
        col1, col2, col3 = st.columns([1, 7, 2])
        with col1:
            st.markdown(f"### {indicator}")
        with col2:
            st.markdown(f"**{module.position}. {module.title}** · {module.duration}")
            if entry.status == ModuleStatus.LOCKED:
                missing = [
                    "safety acknowledgment" if m == SAFETY_GATE_ID else m
                    for m in entry.missing_prerequisites
                ]
                st.caption("Requires: " + ", ".join(missing))
            elif entry.quiz_score is not None:
                st.caption(f"Score: {entry.quiz_score}%")
        with col3:
            if st.button(
                "Open",
                key=f"open_{module.id}",
                disabled=entry.status == ModuleStatus.LOCKED,
                use_container_width=True,
            ):
                open_module(module.id)

    st.divider()
    if nav.is_certificate_eligible():
        if st.button("View certificate", type="primary"):
            go("certificate")
    else:
        st.info("Complete every module to unlock your certificate.")


def open_module(module_id: str):
    nav = st.session_state.navigator
    if nav.start_module(module_id):
        st.session_state.module_id = module_id
        st.session_state.module_opened_at = time.monotonic()
        st.session_state.section_index = 0
        go("module")
    else:
        st.error("This module is locked. Complete prerequisite modules first.")


def change_section(index: int):
    """Credit time spent on the section being left, then move."""
    flush_module_time()
    st.session_state.section_index = index
    st.rerun()


def render_section(module, index: int):
    sections = module.sections
    section = sections[index]
    steps = len(sections) + (1 if module.assessment else 0)

    st.caption(f"Section {index + 1} of {len(sections)}: {section.title}")
    st.progress(index / steps if steps else 0.0)
    st.subheader(section.title)
    st.markdown(section.content)

    col1, _, col2 = st.columns([2, 6, 2])
    with col1:
        if index > 0 and st.button("Previous", use_container_width=True):
            change_section(index - 1)
    with col2:
        last = index == len(sections) - 1
        label = ("Continue to assessment" if module.assessment else "Finish") if last else "Next"
        if st.button(label, type="primary", use_container_width=True):
            change_section(index + 1)


def render_module_view():
    nav = st.session_state.navigator
    module = nav.curriculum.get_module(st.session_state.module_id or "")
    if module is None:
        go("journey")
        return

    st.title(module.title)
    sections = module.sections
    index = min(st.session_state.section_index, len(sections))

    if index < len(sections):
        render_section(module, index)
        return

    if module.description:
        st.markdown(module.description)
    st.subheader("Outcomes")
    for outcome in module.outcomes:
        st.markdown(f"- {outcome}")
    if sections and st.button("Back to content"):
        change_section(index - 1)

    if module.assessment is None:
        if st.button("Mark module complete", type="primary"):
            flush_module_time()
            nav.complete_module(module.id)
            go("journey")
        return

    st.divider()
    st.subheader("Assessment")
    with st.form(f"assessment_{module.id}"):
        answers = {}
        for question in module.assessment.questions:
            answers[question.id] = st.radio(
                question.question, question.options, index=None, key=f"{module.id}_{question.id}"
            )
        submitted = st.form_submit_button("Submit answers")

    if submitted:
        flush_module_time()
        result = nav.submit_assessment(module.id, {k: v for k, v in answers.items() if v})
        if result is None:
            st.error("This module is locked. Complete prerequisite modules first.")
        elif result.passed:
            st.success(f"Passed with {result.percent}% (required: {result.passing_score}%)")
            st.info("Return to the training journey from the sidebar.")
        else:
            st.error(
                f"You scored {result.percent}%. You need {result.passing_score}% to pass. "
                "Please review the content and try again."
            )


def render_certificate_view():
    nav = st.session_state.navigator
    if not nav.claim_certificate():
        go("journey")
        return

    summary = nav.get_certificate_summary()
    st.title("Certificate of Completion")
    st.markdown(f"**Awarded:** {summary.earned_at:%d %B %Y}")
    st.markdown(f"**Average score:** {summary.average_score}%")
    st.markdown(f"**Time spent:** {summary.total_time_spent}")
    for title in summary.modules_completed:
        st.markdown(f"- {title}")


# -----------------------------------------------------------------------------
# Main App
# -----------------------------------------------------------------------------

VIEWS = {
    "welcome": render_welcome_view,
    "safety": render_safety_view,
    "journey": render_journey_view,
    "module": render_module_view,
    "certificate": render_certificate_view,
}


def main():
    """Main application entry point."""
    init_session_state()
    render_sidebar()
    VIEWS[st.session_state.view]()


if __name__ == "__main__":
    main()
