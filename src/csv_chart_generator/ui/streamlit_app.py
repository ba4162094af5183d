from __future__ import annotations

import streamlit as st

from csv_chart_generator.core.bindings import USER_FIELDS, BindingField, ChartKind, relevant_fields
from csv_chart_generator.core.datasets import ingest_upload
from csv_chart_generator.core.errors import ChartGeneratorError
from csv_chart_generator.core.export_pdf import export_as_document
from csv_chart_generator.core.plotting import prepare_chart_data, prepare_table_preview
from csv_chart_generator.core.state import (
    HEIGHT_RANGE,
    WIDTH_RANGE,
    SessionState,
    set_binding,
    set_chart_kind,
    set_display_option,
    set_error,
    visible_error,
)
from csv_chart_generator.plotting.figures import build_matplotlib_figure, build_plotly_figure
from csv_chart_generator.utils.config import load_app_config
from csv_chart_generator.utils.log import log_exception

BINDING_LABELS = {
    BindingField.X: "X Axis",
    BindingField.Y: "Y Axis",
    BindingField.PIE_VALUE: "Pie Value",
}


def _ensure_session_state() -> None:
    if "session" not in st.session_state:
        st.session_state.session = SessionState(config=load_app_config())
    if "last_upload_key" not in st.session_state:
        st.session_state.last_upload_key = None


def _session() -> SessionState:
    return st.session_state.session


def widget_key(name: str, state: SessionState) -> str:
    """Control keys change with every load so widgets start from the reset state."""
    return f"{name}_{state.dataset_version}"


def _handle_upload() -> None:
    state = _session()
    uploaded = st.file_uploader(
        "Drag & Drop CSV File or Click to Upload",
        accept_multiple_files=False,
        help="Supported format: .csv with header row",
    )
    if uploaded is None:
        return
    upload_key = (uploaded.name, uploaded.size, getattr(uploaded, "file_id", None))
    if upload_key == st.session_state.last_upload_key:
        return
    st.session_state.last_upload_key = upload_key
    with st.spinner("Processing CSV File..."):
        ingest_upload(state, uploaded.getvalue(), uploaded.name)


def _select_column(binding: BindingField) -> None:
    state = _session()
    headers = list(state.schema)
    current = state.bindings.get(binding)
    index = headers.index(current) if current in headers else 0
    choice = st.selectbox(
        BINDING_LABELS[binding],
        headers,
        index=index,
        key=widget_key(binding.value, state),
    )
    if choice != current:
        try:
            set_binding(state, binding, choice)
        except ChartGeneratorError as exc:
            set_error(state, str(exc))


def _render_controls() -> None:
    state = _session()
    st.caption(f"Source: {state.source_name or 'uploaded file'} ({len(state.dataset)} rows)")
    if st.button("Clear data", key=widget_key("clear", state)):
        state.clear()
        st.session_state.last_upload_key = None
        st.rerun()

    kinds = list(ChartKind)
    kind = st.selectbox(
        "Chart Type",
        kinds,
        index=kinds.index(state.chart_kind),
        format_func=lambda k: k.label,
        key=widget_key("chart_kind", state),
    )
    if kind is not state.chart_kind:
        set_chart_kind(state, kind)

    display = state.display
    width = st.slider("Chart Width", WIDTH_RANGE[0], WIDTH_RANGE[1], display.width, key=widget_key("width", state))
    height = st.slider(
        "Chart Height", HEIGHT_RANGE[0], HEIGHT_RANGE[1], display.height, key=widget_key("height", state))
    set_display_option(state, "width", width)
    set_display_option(state, "height", height)

    for binding in relevant_fields(state.chart_kind):
        if binding in USER_FIELDS:
            _select_column(binding)

    set_display_option(state, "title", st.text_input(
        "Chart Title", value=display.title, key=widget_key("title", state)))
    set_display_option(state, "show_legend", st.toggle(
        "Show Legend", value=display.show_legend, key=widget_key("show_legend", state)))
    set_display_option(state, "show_grid", st.toggle(
        "Show Grid", value=display.show_grid, key=widget_key("show_grid", state)))
    set_display_option(state, "show_table", st.toggle(
        "Show Data Table", value=display.show_table, key=widget_key("show_table", state)))
    set_display_option(state, "limit_rows", st.toggle(
        f"Limit Chart to {state.config.row_limit} Rows",
        value=display.limit_rows,
        key=widget_key("limit_rows", state),
    ))
    if state.display.show_table:
        set_display_option(state, "show_all_table_rows", st.toggle(
            "Show All Table Rows",
            value=display.show_all_table_rows,
            key=widget_key("show_all_table_rows", state),
        ))


def _render_chart() -> None:
    state = _session()
    chart = prepare_chart_data(state)
    if chart.truncated:
        st.warning(f"Showing only the first {state.config.row_limit} rows for performance.")
    st.plotly_chart(build_plotly_figure(chart, state.display), width="content")

    if state.display.show_table:
        preview = prepare_table_preview(state)
        st.subheader(preview.caption)
        st.dataframe(preview.to_frame(), width="stretch", hide_index=True)


def _render_export() -> None:
    state = _session()
    if not state.has_data:
        st.button("Export PDF", disabled=True)
        return
    try:
        figure = build_matplotlib_figure(prepare_chart_data(state), state.display)
        document = export_as_document(figure, title=state.display.title or "Chart")
    except ChartGeneratorError as exc:
        log_exception("export failed")
        set_error(state, str(exc))
        return
    st.download_button(
        label="Export PDF",
        data=document.payload,
        file_name=document.name,
        mime=document.mime,
    )


def main() -> None:
    st.set_page_config(page_title="CSV Chart Generator", layout="wide")
    _ensure_session_state()
    state = _session()

    header_cols = st.columns([6, 1])
    with header_cols[0]:
        st.title("CSV Chart Generator")

    with st.sidebar:
        _handle_upload()
        if state.has_data:
            _render_controls()

    if state.has_data:
        _render_chart()
    else:
        st.info("Drag & Drop CSV File or Click to Upload (sidebar). Supported format: .csv with header row.")

    # Export last so the document matches what this run rendered.
    with header_cols[1]:
        _render_export()

    message = visible_error(state)
    if message:
        st.error(message)


if __name__ == "__main__":
    main()
