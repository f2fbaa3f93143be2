# src/dashboard/pages/4_Journal.py
"""Journal page - Write and review journal entries."""
import math

import streamlit as st

from src.dashboard.state import DashboardState
from src.journal import JournalEntryFilter, JournalEntryInput, MediaType, Mood

st.set_page_config(page_title="Journal | Trade Journal", page_icon="📝", layout="wide")

st.title("📝 Journal")

state = DashboardState.get_instance()
journal = state.journal
user_id = state.user_id

MOOD_ICONS = {
    Mood.CONFIDENT: "💪",
    Mood.ANXIOUS: "😬",
    Mood.FRUSTRATED: "😤",
    Mood.CALM: "😌",
    Mood.EXCITED: "🤩",
    Mood.NEUTRAL: "😐",
}

trades = state.run(journal.trades.all_for_user(user_id))

with st.expander("✍️ New entry"):
    with st.form("new_entry", clear_on_submit=True):
        title = st.text_input("Title")
        content = st.text_area("What happened?", height=200)
        col1, col2, col3 = st.columns(3)
        with col1:
            mood = st.selectbox("Mood", options=[m.value for m in Mood], index=len(Mood) - 1)
        with col2:
            confidence = st.slider("Confidence", min_value=1, max_value=10, value=5)
        with col3:
            trade_id = st.selectbox("Linked trade", options=["None"] + [t.id for t in trades])
        lessons = st.text_area("Lessons learned")
        tags = st.text_input("Tags (comma separated)")

        if st.form_submit_button("Save entry", type="primary"):
            entry_input = JournalEntryInput(
                title=title,
                content=content,
                mood=Mood(mood),
                trade_id=None if trade_id == "None" else trade_id,
                lessons_learned=lessons or None,
                confidence_score=confidence,
                tags=[t.strip() for t in tags.split(",")] if tags else None,
            )
            try:
                entry = state.run(journal.add_journal_entry(user_id, entry_input))
            except ValueError as e:
                st.error(f"Could not save entry: {e}")
            else:
                if entry is None:
                    st.warning("Journaling is disabled in the settings")
                else:
                    st.success(f"Saved '{entry.title}'")

st.divider()

col1, col2, col3 = st.columns(3)
with col1:
    search = st.text_input("Search titles")
with col2:
    mood_filter = st.selectbox("Mood filter", options=["All"] + [m.value for m in Mood])
with col3:
    sort_field = st.selectbox("Sort by", options=["created_at", "updated_at", "title"])

filters = JournalEntryFilter(
    title=search or None,
    mood=Mood(mood_filter) if mood_filter != "All" else None,
)

page_size = state.settings.dashboard.page_size
first_page = state.run(journal.entries.list_entries(user_id, page_size=page_size, filters=filters))
page_count = max(1, math.ceil(first_page.count / page_size))
page = st.number_input("Page", min_value=1, max_value=page_count, value=1)

result = state.run(
    journal.entries.list_entries(
        user_id,
        page=int(page),
        page_size=page_size,
        sort_field=sort_field,
        sort_direction="asc" if sort_field == "title" else "desc",
        filters=filters,
    )
)

if not result.entries:
    st.info("No journal entries yet", icon="📭")

for entry in result.entries:
    header = f"{MOOD_ICONS[entry.mood]} {entry.title} - {entry.created_at:%Y-%m-%d %H:%M}"
    with st.expander(header):
        if entry.trade_id:
            st.caption(f"Trade {entry.trade_id}")
        st.markdown(entry.content or "_No content_")
        if entry.lessons_learned:
            st.info(f"**Lessons:** {entry.lessons_learned}")
        if entry.confidence_score is not None:
            st.progress(entry.confidence_score / 10, text=f"Confidence {entry.confidence_score}/10")
        if entry.tags:
            st.caption(" ".join(f"#{t}" for t in entry.tags))

        for media in state.run(journal.media.list_for_entry(user_id, entry.id)):
            if media.media_type == MediaType.IMAGE:
                st.image(media.path, caption=media.file_name)
            elif media.media_type == MediaType.VIDEO:
                st.video(media.path)
            elif media.media_type == MediaType.AUDIO:
                st.audio(media.path)
            else:
                st.download_button(
                    f"⬇️ {media.file_name}",
                    data=state.run(journal.media.read_bytes(media)),
                    file_name=media.file_name,
                    key=f"media_{media.id}",
                )

        upload = st.file_uploader("Attach file", key=f"upload_{entry.id}")
        media_type = st.selectbox(
            "Media type", options=[m.value for m in MediaType], key=f"type_{entry.id}"
        )
        col1, col2 = st.columns(2)
        with col1:
            if upload is not None and st.button("Upload", key=f"save_{entry.id}"):
                try:
                    state.run(
                        journal.media.upload(
                            user_id, entry.id, upload.name, upload.getvalue(), MediaType(media_type)
                        )
                    )
                    st.rerun()
                except ValueError as e:
                    st.error(str(e))
        with col2:
            if st.button("🗑️ Delete entry", key=f"delete_{entry.id}"):
                for media in state.run(journal.media.list_for_entry(user_id, entry.id)):
                    state.run(journal.media.delete(user_id, media.id))
                state.run(journal.entries.delete(user_id, entry.id))
                st.rerun()
