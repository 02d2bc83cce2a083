import streamlit as st
import pandas as pd
import json
import os
from datetime import datetime
from typing import Dict, Optional

from trend_config import OUTPUT_PATH

# run with: streamlit run trends_ui.py

TREND_COLUMNS = ["team", "stat", "record", "sample", "display_text", "raw"]


def load_document(path: str = OUTPUT_PATH) -> Optional[Dict]:
    """Read the scraper's JSON output; None when the file is missing or unreadable."""
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            doc = json.load(f)
    except (OSError, json.JSONDecodeError):
        return None
    return doc if isinstance(doc, dict) else None


def document_mode(doc: Dict) -> str:
    if "games" in doc:
        return "games"
    if "trends" in doc:
        return "trends"
    return "unknown"


def trends_frame(doc: Dict) -> pd.DataFrame:
    """Flatten a document into one row per trend, whichever mode wrote it."""
    if document_mode(doc) == "games":
        rows = [{"time": g.get("time", ""), "teams": g.get("teams", ""), "trend": t}
                for g in doc.get("games", []) for t in g.get("trends", [])]
        return pd.DataFrame(rows, columns=["time", "teams", "trend"])
    rows = [{k: t.get(k, "") for k in TREND_COLUMNS} for t in doc.get("trends", [])]
    return pd.DataFrame(rows, columns=TREND_COLUMNS)


def show_games(doc: Dict):
    games = doc.get("games", [])
    st.caption(f"{doc.get('date', '')} · generated {doc.get('generated_at', '')}")
    col1, col2 = st.columns(2)
    col1.metric("Games", len(games))
    col2.metric("Trends", sum(len(g.get("trends", [])) for g in games))
    for g in games:
        with st.expander(f"**{g.get('teams', '')}** ({g.get('time', '')})"):
            for t in g.get("trends", []):
                st.write(f"- {t}")


def show_trends(doc: Dict):
    df = trends_frame(doc)
    st.caption(f"{doc.get('date_display', '')} · updated {doc.get('updated_at', '')}")

    stats = ["All"] + sorted(df["stat"].unique().tolist())
    selected = st.sidebar.selectbox("Bet type", stats)
    if selected != "All":
        df = df[df["stat"] == selected]

    col1, col2 = st.columns(2)
    col1.metric("Trends", len(df))
    col2.metric("Teams", df["team"].nunique())

    for _, row in df.iterrows():
        st.markdown(f"**{row['team']}** · {row['stat']} · {row['record']} ({row['sample']})")
        st.write(row["display_text"])

    st.markdown("---")
    st.dataframe(df[["team", "stat", "record", "sample", "raw"]], use_container_width=True)


def main():
    st.set_page_config(page_title="Betting Trends", layout="wide")
    st.title("Today's Betting Trends")

    doc = load_document()
    if doc is None:
        st.error("No data found. Please run the scraper first.")
        st.info("`python scrape_trends.py --mode games`")
        return

    mode = document_mode(doc)
    if mode == "games":
        show_games(doc)
    elif mode == "trends":
        show_trends(doc)
    else:
        st.warning("Unrecognised file layout.")

    if trends_frame(doc).empty:
        st.info("The last run found no trends.")

    st.download_button(
        label="Download as CSV",
        data=trends_frame(doc).to_csv(index=False),
        file_name=f"trends_{datetime.now().strftime('%Y%m%d')}.csv",
        mime="text/csv",
    )


if __name__ == "__main__":
    main()
