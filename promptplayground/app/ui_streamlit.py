# -*- coding: utf-8 -*-
"""
Run on a free port, e.g.:
  python -m streamlit run promptplayground/app/ui_streamlit.py --server.port 8503

Left: the "current file" (name + text). Right: result of the last command.
"""

from __future__ import annotations
from pathlib import Path

import streamlit as st

from promptplayground.app.controller import AppController, CommandOutcome, EditorDocument


def _show_outcome(outcome: CommandOutcome) -> None:
    if outcome.ok:
        st.success(outcome.message)
    else:
        st.error(outcome.message)
    if outcome.output_path is not None:
        st.session_state["result_text"] = Path(outcome.output_path).read_text(encoding="utf-8")


def main() -> None:
    st.set_page_config(page_title="Prompt Playground", layout="wide")

    st.markdown(
        """
        <style>
            /* Tighten page paddings to push content up/left */
            .block-container {
                padding-top: 0.8rem;
                padding-left: 0.6rem;
                padding-right: 0.6rem;
            }

            /* Big, bold custom field titles */
            .field-title {
                font-size: 1.4rem;
                font-weight: 800;
                margin-bottom: 0.35rem;
            }
        </style>
        """,
        unsafe_allow_html=True,
    )

    st.title("Prompt Playground")
    # one controller per user session
    if "controller" not in st.session_state:
        st.session_state.controller = AppController()
    if "result_text" not in st.session_state:
        st.session_state["result_text"] = ""

    col_left, col_right = st.columns([1, 1], gap="small")

    with col_left:
        st.markdown('<div class="field-title">Current file</div>', unsafe_allow_html=True)
        name_col, ws_col = st.columns(2, gap="small")
        with name_col:
            st.text_input("File name", key="file_name", value="MyClass.cls")
        with ws_col:
            st.text_input("Workspace folder", key="workspace", value=str(Path.cwd()))
        st.text_area(
            label="File text (hidden)",
            key="file_text",
            height=360,
            label_visibility="collapsed",
        )
        stream = st.checkbox("Stream response", key="stream")

        ctrl: AppController = st.session_state.controller
        text = st.session_state.get("file_text", "")
        document = EditorDocument(path=Path(st.session_state.get("file_name") or "untitled"), text=text) if text.strip() else None
        workspace = Path(st.session_state["workspace"]) if st.session_state.get("workspace") else None

        b1, b2, b3 = st.columns(3, gap="small")
        with b1:
            if st.button("Send Apex class", key="btn_source", use_container_width=True):
                with st.spinner("Running..."):
                    _show_outcome(ctrl.send_source_to_llm(document, workspace, stream=stream, progress=st.info))
        with b2:
            if st.button("Send YAML experiment", key="btn_experiment", use_container_width=True):
                with st.spinner("Running..."):
                    _show_outcome(ctrl.send_experiment_to_llm(document, workspace, stream=stream, progress=st.info))
        with b3:
            if st.button("Send raw prompt", key="btn_raw", use_container_width=True):
                with st.spinner("Running..."):
                    _show_outcome(ctrl.send_raw_prompt_to_llm(document, workspace, stream=stream, progress=st.info))

        with st.expander("Generate sample experiment file"):
            st.text_input("Sample file name", key="sample_name", value="sample_prompt.yaml")
            st.text_input("Destination folder", key="sample_dest", value=str(Path.cwd()))
            if st.button("Generate", key="btn_sample"):
                dest = st.session_state.get("sample_dest")
                outcome = ctrl.generate_sample_experiment(
                    st.session_state.get("sample_name"), Path(dest) if dest else None
                )
                _show_outcome(outcome)

    # RIGHT: last result file
    with col_right:
        st.markdown('<div class="field-title">Result</div>', unsafe_allow_html=True)
        st.code(st.session_state["result_text"] or "# no result yet", language="yaml")


if __name__ == "__main__":
    main()
