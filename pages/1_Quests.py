import streamlit as st
from datetime import datetime, time
from questlist.engine import open_engine
from questlist.errors import NotFound, PersistenceFailure
from questlist.services.progression import progress_fraction, xp_threshold
from questlist.ui.theme import load_css

load_css()

if not st.session_state.get("onboarded"):
    st.warning("Please finish onboarding first.")
    st.stop()

st.title("Quests ⚔️")

with open_engine() as engine:
    user = engine.ledger.user
    if user is None:
        st.warning("No profile found. Please finish onboarding first.")
        st.stop()

    # XP bar
    st.markdown(f"**Level {user.level}** · {user.current_xp}/{xp_threshold(user.level)} XP")
    st.progress(progress_fraction(user))

    with st.expander("➕ New Quest"):
        with st.form("add_quest_form", clear_on_submit=True):
            title = st.text_input("Title")
            description = st.text_area("Description (optional)")
            xp_value = st.number_input("XP reward", min_value=1, max_value=500, value=10, step=5)
            category = st.text_input("Category (optional)")
            has_deadline = st.checkbox("Set a deadline")
            deadline_date = st.date_input("Deadline date", value=datetime.now().date())
            deadline_time = st.time_input("Deadline time", value=time(12, 0))
            submitted = st.form_submit_button("Add Quest")

            if submitted:
                deadline = datetime.combine(deadline_date, deadline_time) if has_deadline else None
                try:
                    engine.quests.create(
                        title,
                        description=description,
                        xp_value=int(xp_value),
                        category=category,
                        deadline=deadline,
                    )
                    st.success("Quest added!")
                except ValueError as e:
                    st.error(str(e))
                except PersistenceFailure:
                    st.error("Couldn't save the quest. Please try again.")

    quests = engine.quests.quests
    if not quests:
        st.info("No quests yet. Add one above!")

    for quest in quests:
        col1, col2, col3 = st.columns([6, 1, 1])
        with col1:
            status = "✅" if quest.is_completed else "🔲"
            meta = f"{quest.xp_value} XP"
            if quest.category:
                meta += f" · {quest.category}"
            meta += f" · {quest.date:%Y-%m-%d %H:%M}"
            st.markdown(f"""
            <div class="ql-card">
                <b>{status} {quest.title}</b><br>
                <span class="ql-muted">{meta}</span>
            </div>
            """, unsafe_allow_html=True)
            if quest.description:
                st.caption(quest.description)
        with col2:
            if not quest.is_completed and st.button("Done", key=f"done_{quest.id}"):
                try:
                    engine.quests.complete(quest)
                    engine.ledger.grant_xp(quest.xp_value)
                    st.rerun()
                except NotFound:
                    st.rerun()
                except PersistenceFailure:
                    st.error("Couldn't save your progress. Please try again.")
        with col3:
            if st.button("🗑️", key=f"delete_{quest.id}"):
                try:
                    engine.quests.delete(quest)
                except NotFound:
                    pass  # already gone
                except PersistenceFailure:
                    st.error("Couldn't delete the quest. Please try again.")
                st.rerun()
