import streamlit as st

THEME_COLORS = {
    "system": {"primary": "#1E88E5", "secondary": "#757575", "background": "transparent"},
    "light": {"primary": "#1E88E5", "secondary": "#757575", "background": "#FFFFFF"},
    "dark": {"primary": "#1E88E5", "secondary": "#9E9E9E", "background": "#121212"},
    "colorful": {"primary": "#8E24AA", "secondary": "#EC407A", "background": "#FFF3FB"},
}


def current_theme() -> str:
    return st.session_state.get("theme", "system")


def load_css():
    colors = THEME_COLORS.get(current_theme(), THEME_COLORS["system"])
    st.markdown(f"""
    <style>
    .ql-card {{
        background: {colors['background']};
        border: 1px solid {colors['secondary']};
        border-radius: 10px;
        padding: 12px 16px;
        margin-bottom: 10px;
    }}
    .ql-accent {{ color: {colors['primary']}; }}
    .ql-muted {{ color: {colors['secondary']}; }}
    </style>
    """, unsafe_allow_html=True)
    try:
        with open("assets/theme.css") as f:
            st.markdown(f"<style>{f.read()}</style>", unsafe_allow_html=True)
    except FileNotFoundError:
        pass
