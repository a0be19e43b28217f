import streamlit as st
from questlist.engine import open_engine
from questlist.errors import PersistenceFailure
from questlist.services.achievements import get_achievements
from questlist.services.progression import THEMES
from questlist.ui.theme import load_css

load_css()

if not st.session_state.get("onboarded"):
    st.warning("Please finish onboarding first.")
    st.stop()

st.title("Profile 🧭")

with open_engine() as engine:
    user = engine.ledger.user
    if user is None:
        st.warning("No profile found. Please finish onboarding first.")
        st.stop()

    st.markdown(f"""
    <div class="ql-card" style="text-align: center;">
        <h1>{user.avatar or ''}</h1>
        <h3>{user.name}</h3>
    </div>
    """, unsafe_allow_html=True)

    cols = st.columns(3)
    for col, (label, value) in zip(cols, [
        ("Current Level", user.level),
        ("Current XP", user.current_xp),
        ("Streak", f"{user.streak} 🔥"),
    ]):
        col.metric(label, value)

    st.subheader("Achievements")
    badge_cols = st.columns(3)
    for col, achievement in zip(badge_cols, get_achievements(user)):
        icon = "🏅" if achievement["unlocked"] else "🔒"
        col.markdown(f"""
        <div class="ql-card" style="text-align: center;">
            <h2>{icon}</h2>
            <b>{achievement['title']}</b><br>
            <span class="ql-muted">{achievement['description']}</span>
        </div>
        """, unsafe_allow_html=True)

    st.subheader("Theme")
    current = st.session_state.get("theme", "system")
    choice = st.selectbox(
        "Choose Theme",
        THEMES,
        index=THEMES.index(current) if current in THEMES else 0,
        format_func=str.capitalize,
    )
    if choice != current:
        st.session_state.theme = choice
        try:
            engine.ledger.unlock_theme(choice)
        except PersistenceFailure:
            st.warning("Theme applied, but couldn't be saved to your profile.")
        st.rerun()
