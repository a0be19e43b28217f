import streamlit as st
from questlist.config import get_diagnostics
from questlist.engine import open_engine
from questlist.errors import PersistenceFailure
from questlist.services.reset import reset_all_data
from questlist.store import counts
from questlist.ui.theme import load_css

load_css()
st.title("Settings ⚙️")

with open_engine() as engine:
    st.subheader("Streak")
    st.write("Finished everything you planned for today? Log it to keep your streak going.")
    if st.button("Log a streak day 🔥", disabled=engine.ledger.user is None):
        try:
            user = engine.ledger.record_streak_tick()
            st.success(f"Streak: {user.streak} days")
        except PersistenceFailure:
            st.error("Couldn't save your streak. Please try again.")

    st.divider()

    st.subheader("Diagnostics")
    diag = get_diagnostics()
    diag.update({f"Stored {kind}s": n for kind, n in counts(engine.store).items()})
    st.json(diag)

    st.divider()

    st.subheader("Reset All Data")
    st.write("This will delete all your quests, challenges, and progress. This action cannot be undone.")
    confirm = st.checkbox("I understand")
    if st.button("Reset", type="primary", disabled=not confirm):
        try:
            reset_all_data(engine.store)
        except PersistenceFailure:
            st.error("Reset failed. Your data was not changed.")
        else:
            for key in ("onboarded", "theme"):
                st.session_state.pop(key, None)
            st.rerun()
