"""
Sandbox Preview Panel - Streamlit Application

Renders the preview frame with back/forward/refresh controls and a mirrored
developer console. The panel talks to the sandbox through a LoopbackBridge;
the sidebar can inject sandbox frames by hand while no runtime is attached.
"""

import json

import streamlit as st
import streamlit.components.v1 as components

from preview_panel.config import ConfigError, get_config
from preview_panel.logutil import configure_logging
from preview_panel.panel import PreviewPanel
from preview_panel.sandbox import LoopbackBridge
from preview_panel.schemas import default_tree
from preview_panel.utils import format_log_entry


# Page configuration
st.set_page_config(
    page_title="Sandbox Preview",
    page_icon="🧪",
    layout="wide",
)

# Custom CSS for the console pane
st.markdown("""
<style>
    .console-line {
        font-family: 'Fira Code', 'Consolas', monospace;
        font-size: 0.85rem;
        padding: 2px 8px;
        border-bottom: 1px solid #2a2a2a;
        white-space: pre-wrap;
    }
    .console-warn { background-color: #332b00; color: #f5d67b; }
    .console-error { background-color: #290000; color: #fe7f7f; }
    .console-command { color: #9cdcfe; }
    .console-result { color: #b5cea8; }
</style>
""", unsafe_allow_html=True)

FRAME_HEIGHT = 480

LEVEL_CLASSES = {
    "warn": "console-warn",
    "error": "console-error",
    "command": "console-command",
    "result": "console-result",
}


def create_panel() -> PreviewPanel:
    """Build a bridge and a mounted panel showing the default tree."""
    bridge = LoopbackBridge()
    panel = PreviewPanel(bridge)
    panel.mount()
    panel.update(default_tree())
    st.session_state.bridge = bridge
    st.session_state.panel = panel
    return panel


def init_session_state():
    """Initialize session state variables."""
    if "panel" not in st.session_state:
        create_panel()
    if "console_input" not in st.session_state:
        st.session_state.console_input = ""


def validate_config() -> bool:
    """Validate configuration and show error if invalid."""
    try:
        configure_logging(get_config().log_level)
        return True
    except ConfigError as e:
        st.error(f"⚠️ Configuration Error\n\n{str(e)}")
        return False


def submit_console_input():
    """Callback for the console input box."""
    panel: PreviewPanel = st.session_state.panel
    panel.commands.submit_command(st.session_state.console_input)
    st.session_state.console_input = ""


def display_toolbar(panel: PreviewPanel, snapshot):
    """Display the top toolbar with the console toggle and editor link."""
    _, col1, col2 = st.columns([4, 1, 1])
    with col1:
        label = "Hide Console" if snapshot["show_console"] else "Show Console"
        if st.button(f"🖥️ {label}", use_container_width=True, key="toggle_console"):
            panel.commands.request_toggle_console()
            st.rerun()
    with col2:
        editor_url = panel.commands.request_open_in_codesandbox()
        if editor_url:
            st.link_button("📦 Open In CodeSandbox", editor_url, use_container_width=True)
        else:
            st.button("📦 Open In CodeSandbox", disabled=True, use_container_width=True,
                      key="open_in_codesandbox")


def display_preview(panel: PreviewPanel, snapshot):
    """Display navigation controls, address bar and the preview frame."""
    col1, col2, col3, col4 = st.columns([1, 1, 1, 9])

    with col1:
        if st.button("◀", disabled=not snapshot["can_go_back"], key="nav_back"):
            panel.commands.go_back()
            st.rerun()
    with col2:
        if st.button("▶", disabled=not snapshot["can_go_forward"], key="nav_forward"):
            panel.commands.go_forward()
            st.rerun()
    with col3:
        if st.button("⟳", key="nav_refresh"):
            panel.commands.request_refresh()
            st.rerun()
    with col4:
        st.text_input(
            "Location",
            value=snapshot["location_path"],
            disabled=True,
            label_visibility="collapsed",
        )

    components.iframe(snapshot["current_location"], height=FRAME_HEIGHT, scrolling=True)


def display_console(panel: PreviewPanel, snapshot):
    """Display the mirrored console with clear button and command input."""
    col1, col2 = st.columns([5, 1])
    with col1:
        st.markdown("**Console**")
        if snapshot["evicted_logs"]:
            st.caption(f"{snapshot['evicted_logs']} older entries dropped")
    with col2:
        if st.button("🚫 Clear", use_container_width=True, key="clear_console"):
            panel.commands.request_clear()
            st.rerun()

    with st.container(height=240):
        if not snapshot["logs"]:
            st.caption("Console was cleared")
        for entry in snapshot["logs"]:
            css = LEVEL_CLASSES.get(entry.method, "")
            line = format_log_entry(entry).replace("&", "&amp;").replace("<", "&lt;")
            st.markdown(f'<div class="console-line {css}">{line}</div>', unsafe_allow_html=True)

    st.text_input(
        "›",
        key="console_input",
        on_change=submit_console_input,
        placeholder="Evaluate an expression in the sandbox",
    )


def display_bridge_tools():
    """Sidebar tools for feeding sandbox frames through the bridge."""
    bridge: LoopbackBridge = st.session_state.bridge

    st.header("Sandbox Frames")

    with st.form("urlchange_form", clear_on_submit=True):
        url = st.text_input("urlchange", placeholder="https://example.test/page")
        if st.form_submit_button("Emit urlchange") and url:
            bridge.emit({"type": "urlchange", "url": url})
            st.rerun()

    with st.form("console_form", clear_on_submit=True):
        method = st.selectbox("Method", ["log", "info", "warn", "error", "debug", "clear"])
        args = st.text_input("Arguments (JSON list)", value='["hello"]')
        if st.form_submit_button("Emit console"):
            try:
                data = json.loads(args or "[]")
            except json.JSONDecodeError as e:
                st.error(f"Arguments are not valid JSON: {e}")
            else:
                bridge.emit({"type": "console", "log": {"method": method, "data": data}})
                st.rerun()

    st.divider()

    st.header("Dispatched Commands")
    if bridge.dispatched:
        st.code("\n".join(json.dumps(c) for c in bridge.dispatched[-20:]), language="json")
    else:
        st.caption("Nothing dispatched yet")

    if st.button("🗑️ Reset Panel", use_container_width=True):
        st.session_state.panel.unmount()
        create_panel()
        st.rerun()


# =============================================================================
# MAIN APPLICATION
# =============================================================================

def main():
    """Main application entry point."""
    # Validate configuration
    if not validate_config():
        return

    init_session_state()
    panel: PreviewPanel = st.session_state.panel
    snapshot = panel.snapshot()

    with st.sidebar:
        display_bridge_tools()

    display_toolbar(panel, snapshot)
    display_preview(panel, snapshot)

    if snapshot["show_console"]:
        st.divider()
        display_console(panel, snapshot)


if __name__ == "__main__":
    main()
