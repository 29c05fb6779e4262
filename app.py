import logging

import streamlit as st

from materials.activity_log import ActivityLog, JsonLinesLogStore
from materials.agent import GenerationClient
from materials.config import AppSettings, GenerationConfig
from materials.document import DocumentFormat, DocumentKind
from materials.errors import MaterialsError
from materials.file_parser import parse_file
from materials.pipeline import GeneratedMaterials, prepare_download, run_generation

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

st.set_page_config(page_title="Application Materials Generator", layout="wide")
st.title("Application Materials Generator")

settings = AppSettings.from_env()

try:
    base_config = GenerationConfig.from_env()
    config_error = None
except ValueError as e:
    # pydantic ValidationError is a ValueError
    base_config = GenerationConfig()
    config_error = f"Invalid generation settings: {e}"


def _get_log() -> ActivityLog:
    # one log per browser session, backed by the JSON Lines file
    if "activity_log" not in st.session_state:
        st.session_state["activity_log"] = ActivityLog(
            JsonLinesLogStore(settings.log_path), capacity=settings.log_capacity
        )
    return st.session_state["activity_log"]


log = _get_log()

st.session_state.setdefault("resume_text", "")
st.session_state.setdefault("materials", GeneratedMaterials())
st.session_state.setdefault("generation_error", None)
st.session_state.setdefault("prepared", {})


def _on_upload():
    uploaded = st.session_state.get("resume_upload")
    st.session_state.pop("upload_error", None)
    if uploaded is None:
        st.session_state["resume_text"] = ""
        return
    try:
        st.session_state["resume_text"] = parse_file(
            uploaded.name, uploaded.getvalue(), uploaded.type, log=_get_log(), max_mb=settings.max_upload_mb
        )
    except MaterialsError as e:
        st.session_state["resume_text"] = ""
        st.session_state["upload_error"] = e.detail


def _clear_outputs():
    st.session_state["materials"] = GeneratedMaterials()
    st.session_state["generation_error"] = None
    st.session_state["prepared"] = {}


main_col, sidebar_col = st.columns([3, 1])

with sidebar_col:
    st.header("Controls")
    use_grounding = st.checkbox(
        "Search the web for company details",
        value=base_config.use_grounding,
        help="Lets the cover letter and resume use public company information.",
    )
    if st.button("Clear Results", key="clear_results_btn"):
        _clear_outputs()
        st.success("Results cleared.")

with main_col:
    st.subheader("Inputs")
    with st.expander("Resume", expanded=True):
        st.file_uploader(
            f"Upload your resume (PDF, DOCX or TXT, max {settings.max_upload_mb:g} MB)",
            type=["pdf", "docx", "txt"],
            key="resume_upload",
            on_change=_on_upload,
        )
        if st.session_state.get("upload_error"):
            st.error(st.session_state["upload_error"])
        elif st.session_state["resume_text"]:
            st.caption(f"Resume loaded: {len(st.session_state['resume_text'])} characters.")
    with st.expander("Job Description", expanded=True):
        job_description = st.text_area("Job Description", height=220, key="jd_input")
    with st.expander("Application Questions (optional)", expanded=False):
        questions_raw = st.text_area("One question per line", height=140, key="questions_input")

    if st.button("Generate Application Materials", type="primary"):
        _clear_outputs()
        if config_error:
            st.session_state["generation_error"] = config_error
            log.error("App", "generate", "Invalid generation settings.", {"error": config_error})
        else:
            config = base_config.model_copy(update={"use_grounding": use_grounding})
            with st.spinner("Generating your materials..."):
                outcome = run_generation(
                    st.session_state["resume_text"],
                    job_description,
                    (questions_raw or "").splitlines(),
                    GenerationClient(config, log),
                    log,
                )
            st.session_state["materials"] = outcome.materials
            st.session_state["generation_error"] = outcome.error

    if st.session_state["generation_error"]:
        st.error(st.session_state["generation_error"])

materials = st.session_state["materials"]


def _render_downloads(kind: DocumentKind, content: str):
    cols = st.columns(len(DocumentFormat))
    for col, fmt in zip(cols, DocumentFormat):
        key = f"{kind.value}_{fmt.value}"
        with col:
            if st.button(f"Prepare {fmt.value.upper()}", key=f"prepare_{key}"):
                try:
                    st.session_state["prepared"][key] = prepare_download(
                        content,
                        kind,
                        fmt,
                        log=log,
                        applicant_name=materials.applicant_name,
                        company_name=materials.company_name,
                        settle_delay=settings.download_settle_delay,
                    )
                except MaterialsError as e:
                    st.session_state["prepared"].pop(key, None)
                    st.error(e.detail)
            rendered = st.session_state["prepared"].get(key)
            if rendered is not None:
                st.download_button(
                    f"Download {rendered.file_name}",
                    data=rendered.data,
                    file_name=rendered.file_name,
                    mime=rendered.mime_type,
                    key=f"download_{key}",
                )


st.subheader("Generated Materials")
any_output = False
for kind in DocumentKind:
    content = materials.content_for(kind)
    if not content:
        continue
    any_output = True
    with st.expander(kind.display_name, expanded=kind is DocumentKind.RESUME):
        st.markdown(content, unsafe_allow_html=False)
        _render_downloads(kind, content)
if not any_output:
    st.info("Upload a resume, paste a job description and click Generate.")

with st.expander("Activity Log", expanded=False):
    recent = log.tail(settings.ui_log_lines)
    st.code(log.format_as_text(recent) or "No log entries.", language="text")
    col_dl, col_clear = st.columns(2)
    with col_dl:
        st.download_button(
            "Download Full Log",
            data=log.format_as_text().encode("utf-8"),
            file_name="activity_log.txt",
            mime="text/plain",
            key="download_log",
        )
    with col_clear:
        if st.button("Clear Log", key="clear_log_btn"):
            log.clear()
            st.success("Activity log cleared.")
