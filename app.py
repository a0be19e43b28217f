import streamlit as st
from questlist.config import configure_logging
from questlist.db import init_db
from questlist.engine import open_engine
from questlist.errors import PersistenceFailure
from questlist.ui.theme import load_css

st.set_page_config(page_title="QuestList", page_icon="⚔️", layout="wide")

# Init DB on first load
if "db_init" not in st.session_state:
    configure_logging()
    init_db()
    st.session_state.db_init = True

load_css()

with open_engine() as engine:
    if engine.ledger.has_user:
        st.session_state.onboarded = True

    if not st.session_state.get("onboarded"):
        st.markdown("<div style='text-align: center; margin-top: 50px;'>", unsafe_allow_html=True)
        st.title("QuestList ⚔️")
        st.subheader("Turn your to-dos into quests")

        with st.form("onboarding_form"):
            name = st.text_input("Name")
            avatar = st.selectbox("Avatar", ["🧙", "🧝", "🦸", "🥷", "🧚"])
            submitted = st.form_submit_button("Start Adventure")

            if submitted and name:
                try:
                    engine.ledger.onboard(name, avatar)
                    st.session_state.onboarded = True
                    st.rerun()
                except PersistenceFailure:
                    st.error("Couldn't save your profile. Please try again.")
        st.markdown("</div>", unsafe_allow_html=True)

    else:
        user = engine.ledger.user
        st.markdown(f"### Welcome back, {user.avatar or ''} {user.name}! 👋")
        st.write("Use the sidebar to manage your Quests, check Daily Challenges, or view your Profile.")
        st.info("👈 Open the sidebar to get started!")
