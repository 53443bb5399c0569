import streamlit as st
import requests
import pandas as pd
import os
import plotly.express as px
import plotly.graph_objects as go
from datetime import datetime

# Page configuration
st.set_page_config(
    page_title="Emojilens",
    page_icon="😊",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS for better styling
st.markdown("""
<style>
    .sentiment-positive { color: #28a745; font-weight: bold; }
    .sentiment-negative { color: #dc3545; font-weight: bold; }
    .sentiment-neutral { color: #6c757d; font-weight: bold; }
    .emoji-chip { font-size: 1.6rem; }
    .stTabs [data-baseweb="tab-list"] {
        gap: 24px;
    }
</style>
""", unsafe_allow_html=True)

SENTIMENT_COLORS = {"positive": "#28a745", "neutral": "#6c757d", "negative": "#dc3545"}

# Get API base URL from environment or use default
DEFAULT_API_BASE = os.getenv("API_BASE_URL", "http://localhost:8080")

# Sidebar configuration
st.sidebar.title("⚙️ Configuration")
API_BASE = st.sidebar.text_input("API Base URL", DEFAULT_API_BASE)
API = f"{API_BASE}/api/v1"

# Check API health
try:
    health_resp = requests.get(f"{API_BASE}/health", timeout=5)
    if health_resp.ok:
        st.sidebar.success("✅ API Connected")
    else:
        st.sidebar.error("❌ API Error")
except requests.RequestException:
    st.sidebar.error("❌ API Unreachable")

# Session state
if "user" not in st.session_state:
    st.session_state.user = None
if "analysis" not in st.session_state:
    st.session_state.analysis = None
if "content" not in st.session_state:
    st.session_state.content = ""
if "generation_id" not in st.session_state:
    st.session_state.generation_id = None

# A GitHub OAuth round trip lands back here with ?user=<id>
query_user = st.query_params.get("user")
if query_user and not st.session_state.user:
    try:
        uresp = requests.get(f"{API}/user/{query_user}", timeout=10)
        if uresp.ok:
            st.session_state.user = uresp.json()
    except requests.RequestException as e:
        st.sidebar.error(f"Could not load user: {e}")

# ---- Sign in ----
st.sidebar.markdown("---")
st.sidebar.markdown("### 👤 Account")
if st.session_state.user:
    st.sidebar.success(f"Signed in as **{st.session_state.user['username']}**")
    if st.sidebar.button("Sign out"):
        st.session_state.user = None
        st.session_state.analysis = None
        st.rerun()
else:
    username = st.sidebar.text_input("Username")
    if st.sidebar.button("Sign in", type="primary"):
        try:
            aresp = requests.post(f"{API}/auth/simple", json={"username": username}, timeout=10)
            if aresp.ok:
                st.session_state.user = aresp.json()["user"]
                st.rerun()
            else:
                st.sidebar.error(aresp.json().get("detail", aresp.text))
        except requests.RequestException as e:
            st.sidebar.error(f"Request failed: {e}")
    st.sidebar.markdown(f"[Sign in with GitHub]({API}/auth/github)")

# Main title
st.title("😊 Emojilens")
st.markdown("Count the emojis in your text, read their mood, and keep a history of your analyses")

tab1, tab2, tab3, tab4 = st.tabs(["📝 Analyze", "📚 History", "📊 Visualizations", "🧪 Test Generator"])


def render_analysis(data):
    stats = data.get("stats") or {}
    sentiment = data.get("sentiment") or {}

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Total Emojis", stats.get("total_emojis", 0))
    with col2:
        st.metric("Unique Emojis", stats.get("unique_emojis", 0))
    with col3:
        most_used = stats.get("most_used")
        st.metric("Most Used", most_used["emoji"] if most_used else "-")
    with col4:
        label = sentiment.get("sentiment", "neutral")
        st.metric("Sentiment", label.capitalize(), f"{sentiment.get('confidence', 0):.0%} confidence",
                  delta_color="off")

    st.markdown("### 💡 Insights")
    for insight in data.get("insights") or []:
        st.markdown(f"- {insight}")


# ==================== TAB 1: ANALYZE ====================
with tab1:
    st.header("📝 Analyze Emoji Usage")

    col1, col2 = st.columns([2, 1])

    with col2:
        st.markdown("### ✨ Popular Emojis")
        try:
            presp = requests.get(f"{API}/popular-emojis", timeout=10)
            popular = presp.json() if presp.ok else []
        except requests.RequestException:
            popular = []
        picks = st.multiselect("Add emojis to your text", popular[:60])

    with col1:
        title = st.text_input("Title", placeholder="My message")
        content = st.text_area(
            "Text",
            value=st.session_state.content,
            placeholder="Type or paste text with emojis 🎉",
            height=200,
        )
        if picks:
            content = f"{content} {''.join(picks)}"
            st.caption(f"Will analyze: {content}")

    if st.button("🔍 Analyze", type="primary", use_container_width=True):
        if not st.session_state.user:
            st.warning("Please sign in first")
        elif not title.strip() or not content.strip():
            st.warning("Please enter a title and some text")
        else:
            with st.spinner("Analyzing..."):
                try:
                    resp = requests.post(
                        f"{API}/analyze-emoji",
                        json={"user_id": st.session_state.user["id"], "title": title, "content": content},
                        timeout=30,
                    )
                    if resp.ok:
                        st.session_state.analysis = resp.json()
                        st.success("✅ Analysis saved!")
                    else:
                        st.error(f"API error: {resp.status_code} - {resp.text}")
                except requests.RequestException as e:
                    st.error(f"Request failed: {e}")

    if st.session_state.analysis:
        st.markdown("---")
        st.subheader("📊 Analysis Results")
        render_analysis(st.session_state.analysis)

# ==================== TAB 2: HISTORY ====================
with tab2:
    st.header("📚 Your Analyses")

    if not st.session_state.user:
        st.info("Sign in to see your saved analyses")
    else:
        try:
            hresp = requests.get(f"{API}/user/{st.session_state.user['id']}/emoji-texts", timeout=10)
            history = hresp.json() if hresp.ok else []
        except requests.RequestException as e:
            history = []
            st.error(f"Request failed: {e}")

        if not history:
            st.info("No analyses yet")

        for record in history:
            with st.expander(f"{record['title']} · {record['total_emojis']} emojis"):
                st.write(record["content"])
                st.caption(f"Updated {record['updated_at']}")

                new_title = st.text_input("Title", record["title"], key=f"title_{record['id']}")
                new_content = st.text_area("Text", record["content"], key=f"content_{record['id']}")
                c1, c2 = st.columns(2)
                with c1:
                    if st.button("💾 Save", key=f"save_{record['id']}"):
                        payload = {}
                        if new_title != record["title"]:
                            payload["title"] = new_title
                        if new_content != record["content"]:
                            payload["content"] = new_content
                        if payload:
                            uresp = requests.put(f"{API}/emoji-text/{record['id']}", json=payload, timeout=30)
                            if uresp.ok:
                                if uresp.json().get("stats"):
                                    st.session_state.analysis = uresp.json()
                                st.rerun()
                            else:
                                st.error(f"API error: {uresp.status_code} - {uresp.text}")
                with c2:
                    if st.button("🗑️ Delete", key=f"delete_{record['id']}"):
                        dresp = requests.delete(f"{API}/emoji-text/{record['id']}", timeout=10)
                        if dresp.ok:
                            st.rerun()
                        else:
                            st.error(f"API error: {dresp.status_code}")

# ==================== TAB 3: VISUALIZATIONS ====================
with tab3:
    st.header("📊 Emoji Visualizations")

    data = st.session_state.analysis
    entries = (data.get("stats") or {}).get("emoji_counts", []) if data else []

    if entries:
        df = pd.DataFrame(entries)

        col1, col2 = st.columns(2)
        with col1:
            st.subheader("🥧 Emoji Share")
            fig_pie = px.pie(df, values="count", names="emoji", hole=0.4)
            st.plotly_chart(fig_pie, use_container_width=True)
        with col2:
            st.subheader("📊 Emoji Counts")
            fig_bar = px.bar(df, x="emoji", y="count", labels={"count": "Occurrences", "emoji": "Emoji"})
            st.plotly_chart(fig_bar, use_container_width=True)

        st.subheader("🎯 Sentiment Gauge")
        sentiment = data.get("sentiment") or {}
        score = sentiment.get("score", 0)
        fig_gauge = go.Figure(go.Indicator(
            mode="gauge+number",
            value=score,
            domain={'x': [0, 1], 'y': [0, 1]},
            title={'text': f"Emoji sentiment ({sentiment.get('sentiment', 'neutral')})"},
            gauge={
                'axis': {'range': [-1, 1]},
                'bar': {'color': "darkblue"},
                'steps': [
                    {'range': [-1, -0.3], 'color': SENTIMENT_COLORS["negative"]},
                    {'range': [-0.3, 0.3], 'color': SENTIMENT_COLORS["neutral"]},
                    {'range': [0.3, 1], 'color': SENTIMENT_COLORS["positive"]}
                ],
            }
        ))
        fig_gauge.update_layout(height=300)
        st.plotly_chart(fig_gauge, use_container_width=True)

        st.subheader("📋 Data Table")
        st.dataframe(df, use_container_width=True)
        st.download_button(
            label="📥 Download CSV",
            data=df.to_csv(index=False),
            file_name=f"emoji_analysis_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv",
            mime="text/csv"
        )
    else:
        st.info("👆 Analyze some text with emojis first to see visualizations")

# ==================== TAB 4: TEST GENERATOR ====================
with tab4:
    st.header("🧪 AI Test Case Generator")

    user = st.session_state.user
    if not user or not user.get("github_id"):
        st.info("Sign in with GitHub from the sidebar to pick files from your repositories")
    else:
        try:
            rresp = requests.get(f"{API}/user/{user['id']}/repositories", timeout=30)
            repos = rresp.json() if rresp.ok else []
            if not rresp.ok:
                st.error(f"API error: {rresp.status_code} - {rresp.text}")
        except requests.RequestException as e:
            repos = []
            st.error(f"Request failed: {e}")

        if repos:
            repo = st.selectbox("Repository", repos, format_func=lambda r: r["full_name"])
            path = st.text_input("Folder", "")
            fresp = requests.get(f"{API}/repository/{repo['id']}/files", params={"path": path}, timeout=30)
            files = [f for f in fresp.json() if f["type"] == "file"] if fresp.ok else []
            selected = st.multiselect("Files", [f["path"] for f in files])
            framework = st.selectbox("Framework", ["jest", "pytest", "junit", "selenium"])

            if st.button("✨ Generate Test Cases", type="primary", disabled=not selected):
                gresp = requests.post(
                    f"{API}/generate-test-cases",
                    json={
                        "user_id": user["id"],
                        "repository_id": repo["id"],
                        "selected_files": selected,
                        "framework": framework,
                    },
                    timeout=30,
                )
                if gresp.ok:
                    st.session_state.generation_id = gresp.json()["id"]
                else:
                    st.error(f"API error: {gresp.status_code} - {gresp.text}")

            if st.session_state.generation_id:
                generation = requests.get(
                    f"{API}/test-case-generation/{st.session_state.generation_id}", timeout=10
                ).json()
                if generation["status"] == "generating":
                    st.info("⏳ Generating test case summaries...")
                    if st.button("🔄 Refresh"):
                        st.rerun()
                elif generation["status"] == "failed":
                    st.error(f"Test case generation failed: {generation.get('error')}")
                else:
                    for index, summary in enumerate(generation["summaries"]):
                        with st.expander(f"{summary['title']} · {summary['test_type']}"):
                            st.write(summary["description"])
                            st.caption(
                                f"{summary['filename']} · {summary['estimated_tests']} test methods · "
                                f"{summary['estimated_coverage']}% coverage · {summary['estimated_runtime']} to run"
                            )
                            if st.button("💻 Generate Code", key=f"code_{index}"):
                                cresp = requests.post(
                                    f"{API}/generate-test-code",
                                    json={"generation_id": generation["id"], "summary_index": index},
                                    timeout=120,
                                )
                                if not cresp.ok:
                                    st.error(f"API error: {cresp.status_code} - {cresp.text}")

                    tests = requests.get(
                        f"{API}/test-case-generation/{generation['id']}/generated-tests", timeout=10
                    ).json()
                    for test_case in tests:
                        st.markdown(f"#### {test_case['title']}")
                        st.code(test_case["code"])
                        if test_case.get("pr_url"):
                            st.markdown(f"🔗 [Pull request]({test_case['pr_url']})")
                        elif st.button("🚀 Create Pull Request", key=f"pr_{test_case['id']}"):
                            prresp = requests.post(
                                f"{API}/create-pr",
                                json={
                                    "repository_id": repo["id"],
                                    "test_case_id": test_case["id"],
                                    "branch_name": f"test-case-{test_case['id']}",
                                    "title": f"Add {test_case['title']}",
                                    "description": f"Generated test case for {test_case['filename']}\n\n{test_case['description']}",
                                },
                                timeout=60,
                            )
                            if prresp.ok:
                                st.success(f"✅ Pull request created: {prresp.json()['pr_url']}")
                            else:
                                st.error(f"API error: {prresp.status_code} - {prresp.text}")

# Footer
st.markdown("---")
st.markdown(
    """
    <div style="text-align: center; color: #666;">
        <p>Emojilens | Built with FastAPI and Streamlit</p>
    </div>
    """,
    unsafe_allow_html=True
)
