import streamlit as st
from questlist.engine import open_engine
from questlist.errors import NotFound, PersistenceFailure
from questlist.ui.theme import load_css

load_css()

if not st.session_state.get("onboarded"):
    st.warning("Please finish onboarding first.")
    st.stop()

st.title("Daily Challenges 🏆")


@st.dialog("Complete Challenge")
def confirm_completion(challenge):
    st.write(f"Are you sure you want to mark '{challenge.description}' as completed?")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("Complete", key="btn_confirm_challenge"):
            try:
                with open_engine() as engine:
                    engine.challenges.complete(challenge)
            except NotFound:
                pass  # batch was regenerated meanwhile
            except PersistenceFailure:
                st.error("Couldn't save the challenge. Please try again.")
                return
            st.rerun()
    with col2:
        if st.button("Cancel", key="btn_cancel_challenge"):
            st.rerun()


with open_engine() as engine:
    try:
        challenges = engine.refresh_challenges()
    except PersistenceFailure:
        st.error("Couldn't update today's challenges.")
        challenges = engine.challenges.challenges

    done = sum(1 for c in challenges if c.is_completed)
    st.caption(f"{done}/{len(challenges)} completed today")

    for challenge in challenges:
        col1, col2 = st.columns([6, 1])
        with col1:
            mark = "✅" if challenge.is_completed else "⭐"
            st.markdown(f"""
            <div class="ql-card">
                <b>{mark} {challenge.description}</b><br>
                <span class="ql-accent">Reward: {challenge.reward_xp} XP</span>
            </div>
            """, unsafe_allow_html=True)
        with col2:
            if not challenge.is_completed and st.button("Done", key=f"challenge_{challenge.id}"):
                confirm_completion(challenge)
