"""
Donation History Dashboard
Read-only view of the donation history account, powered by Streamlit.

    streamlit run bloodchain/dashboard/app.py
"""
import time

import streamlit as st

from bloodchain.dashboard.rows import blood_type_counts, history_rows
from bloodchain.domain.errors import DonationError
from bloodchain.settings.settings import load_settings
from bloodchain.storage.accounts import FileHistoryAccount
from bloodchain.storage.history_store import HistoryStore

# ─────────────────────────────────────────────
# Page Config
# ─────────────────────────────────────────────
st.set_page_config(
    page_title="Donation History",
    page_icon="🩸",
    layout="wide",
    initial_sidebar_state="collapsed"
)

cfg = load_settings()

# ─────────────────────────────────────────────
# Sidebar (compact)
# ─────────────────────────────────────────────
with st.sidebar:
    st.markdown("### ⚙️ Settings")
    account_path = st.text_input("Account File", value=str(cfg.storage.account_path))
    refresh_rate = st.slider("Refresh (s)", 1, 30, cfg.dashboard.refresh_seconds)
    auto_refresh = st.checkbox("Auto-refresh", value=True)

# ─────────────────────────────────────────────
# Load Data
# ─────────────────────────────────────────────
account = FileHistoryAccount(account_path, cfg.storage.capacity_bytes)

st.title("🩸 Donation History")

if not account.exists():
    st.warning("No account yet. Initialize one with: `bloodchain init`")
    if auto_refresh:
        time.sleep(refresh_rate)
        st.rerun()
    st.stop()

try:
    donations = HistoryStore(account).scan()
except DonationError as e:
    st.error(f"Account unreadable: {e}")
    st.stop()

# ─────────────────────────────────────────────
# Metrics
# ─────────────────────────────────────────────
m1, m2, m3 = st.columns(3)
m1.metric("Donations", len(donations))
m2.metric("Used", f"{account.occupied} B")
usage = f"{account.occupied / account.capacity * 100:.0f}%" if account.capacity else "-"
m3.metric("Capacity Used", usage)

st.divider()

# ─────────────────────────────────────────────
# Blood Types
# ─────────────────────────────────────────────
counts = blood_type_counts(donations)
if counts:
    st.subheader("Blood Types")
    cols = st.columns(min(8, len(counts)))
    for idx, (blood_type, n) in enumerate(counts.items()):
        cols[idx % len(cols)].metric(blood_type, n)
    st.divider()

# ─────────────────────────────────────────────
# Donation Log
# ─────────────────────────────────────────────
st.subheader("📋 Donations")
if not donations:
    st.info("No donations yet.")
else:
    st.dataframe(
        history_rows(donations, max_rows=cfg.dashboard.max_rows),
        use_container_width=True,
        hide_index=True,
    )

# ─────────────────────────────────────────────
# Auto Refresh
# ─────────────────────────────────────────────
if auto_refresh:
    time.sleep(refresh_rate)
    st.rerun()
