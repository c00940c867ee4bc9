"""
Streamlit Frontend for the Finance Tracker

A single-page dashboard behind a password gate, with three views:
1. Dashboard - period filter, totals, bar chart, category breakdown
2. Riwayat   - every transaction, with delete
3. Invoice   - yearly invoice list, create from an income transaction

All numbers on screen come from the aggregation engine, recomputed on
every rerun from the stores' in-memory collections.
"""

import asyncio
from datetime import datetime, time, timedelta

import plotly.graph_objects as go
import streamlit as st
from pydantic import ValidationError

from finance_tracker.formatting import (
    format_currency,
    format_date,
    format_short,
    parse_amount_input,
)
from finance_tracker.models import (
    AllPeriods,
    MonthPeriod,
    TransactionDraft,
    TransactionType,
    YearPeriod,
    categories_for,
)
from finance_tracker.orchestrator import AppComponents, create_app_components
from finance_tracker.services.storage import StorageError
from finance_tracker.stats import (
    MONTH_NAMES,
    available_years,
    build_dashboard,
    income_transactions,
    invoice_draft_from_transaction,
    invoice_summary,
    invoice_years,
    invoices_in_year,
    local_date,
    local_today,
)


# Page configuration
st.set_page_config(
    page_title="Kedjora Finance",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .big-number {
        font-size: 2em;
        font-weight: bold;
    }
</style>
""", unsafe_allow_html=True)


CATEGORY_ICONS = {
    # Income
    "Project": "💻",
    "Gaji": "💼",
    "Bonus": "🎁",
    "Investasi": "📈",
    # Expense
    "Makanan": "🍽️",
    "Transport": "🚌",
    "Internet": "📶",
    "Listrik": "⚡",
    "Belanja": "🛍️",
    "Hiburan": "🎬",
    "Kesehatan": "🩺",
    "Pendidikan": "🎓",
    # Fallback
    "Lainnya": "💳",
}
UNKNOWN_CATEGORY_ICON = "💲"

FILTER_MODES = {"all": "Semua", "month": "Bulanan", "year": "Tahunan"}
PENDING_DELETE_KEY = "pending_delete"


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def category_icon(category: str) -> str:
    return CATEGORY_ICONS.get(category, UNKNOWN_CATEGORY_ICON)


def confirm_delete(kind: str, record_id: str, prompt: str, label: str = "🗑️") -> bool:
    """
    Two-step delete button. The first click asks, the second one confirms.

    Returns True only on the run where the user confirmed.
    """
    pending = (kind, record_id)
    if st.session_state.get(PENDING_DELETE_KEY) != pending:
        if st.button(label, key=f"delete_{kind}_{record_id}", help=prompt):
            st.session_state[PENDING_DELETE_KEY] = pending
            st.rerun()
        return False

    st.warning(prompt)
    if st.button("Ya, hapus", key=f"confirm_{kind}_{record_id}", type="primary"):
        st.session_state.pop(PENDING_DELETE_KEY, None)
        return True
    if st.button("Batal", key=f"cancel_{kind}_{record_id}"):
        st.session_state.pop(PENDING_DELETE_KEY, None)
        st.rerun()
    return False


@st.cache_resource
def get_components() -> AppComponents:
    """Create components and load both collections once per process."""
    components = create_app_components()
    run_async(components.transactions.load())
    run_async(components.invoices.load())
    return components


def main():
    """Main application entry point."""
    components = get_components()
    gate = components.access_gate(st.session_state)
    recheck = timedelta(seconds=components.settings.access_gate.recheck_seconds)

    if not gate.is_authenticated():
        render_login(gate)
        return

    watch_session(gate, recheck)

    st.sidebar.title("💰 Kedjora Finance")
    st.sidebar.caption(f"Penyimpanan: {components.backend.value}")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Menu",
        ["📊 Dashboard", "🕘 Riwayat", "🧾 Invoice"],
        index=0,
    )

    if st.sidebar.button("🔒 Keluar"):
        gate.logout()
        st.rerun()

    # Error banner
    for store in (components.transactions, components.invoices):
        if store.error:
            st.error(store.error)

    if page == "📊 Dashboard":
        render_dashboard_page(components)
    elif page == "🕘 Riwayat":
        render_history_page(components)
    elif page == "🧾 Invoice":
        render_invoice_page(components)


def render_login(gate):
    """Render the password form."""
    st.title("🔐 Kedjora Finance")

    with st.form("login"):
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Masuk", type="primary")

    if submitted:
        if gate.login(password):
            st.rerun()
        else:
            st.error("Password salah!")


def watch_session(gate, every: timedelta):
    """Re-check the session window on a timer, independent of user input."""

    @st.fragment(run_every=every)
    def _check():
        if not gate.is_authenticated():
            st.rerun()
        minutes, seconds = divmod(int(gate.remaining().total_seconds()), 60)
        st.sidebar.caption(f"Sesi berakhir dalam {minutes}:{seconds:02d}")

    _check()


def select_period(components: AppComponents, years: list[int]):
    """Render the filter controls and return the chosen period."""
    today = local_today(components.tz)

    col1, col2 = st.columns([2, 1])
    with col1:
        mode = st.radio(
            "Periode",
            options=list(FILTER_MODES),
            index=1,
            format_func=FILTER_MODES.get,
            horizontal=True,
        )
    if mode == "all":
        return AllPeriods()

    with col2:
        year_options = years if today.year in years else [today.year, *years]
        year = st.selectbox("Tahun", options=year_options, index=year_options.index(today.year))

    if mode == "year":
        return YearPeriod(year=year)

    month = st.select_slider(
        "Bulan",
        options=list(range(12)),
        value=today.month - 1,
        format_func=lambda m: MONTH_NAMES[m][:3],
    )
    return MonthPeriod(year=year, month=month)


def render_dashboard_page(components: AppComponents):
    """Render totals, charts and the add-transaction form."""
    st.title("📊 Dashboard")

    transactions = components.transactions.records
    invoices = components.invoices.records
    years = available_years(transactions, invoices, tz=components.tz)
    period = select_period(components, years)
    view = build_dashboard(transactions, invoices, period, tz=components.tz)

    st.subheader(view.period_label)
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Saldo", format_currency(view.summary.balance))
    col2.metric("Pemasukan", format_currency(view.summary.total_income))
    col3.metric("Pengeluaran", format_currency(view.summary.total_expense))
    col4.metric(
        f"Invoice ({view.invoice_summary.count})",
        format_currency(view.invoice_summary.total),
    )

    st.markdown("---")
    chart_col, category_col = st.columns([3, 2])

    with chart_col:
        st.markdown(f"#### {view.series_title}")
        labels = [b.label for b in view.series]
        fig = go.Figure()
        fig.add_trace(go.Bar(x=labels, y=[float(b.income) for b in view.series], name="Pemasukan", marker_color="#10b981"))
        fig.add_trace(go.Bar(x=labels, y=[float(b.expense) for b in view.series], name="Pengeluaran", marker_color="#f43f5e"))
        fig.update_layout(barmode="group", template="plotly_dark", margin=dict(t=30, b=10, l=10, r=10))
        fig.update_xaxes(type="category")
        fig.update_yaxes(range=[0, float(view.max_series_value) * 1.1])
        st.plotly_chart(fig, use_container_width=True)
        st.caption(f"Tertinggi: {format_short(view.max_series_value)}")

    with category_col:
        st.markdown("#### Pengeluaran per Kategori")
        if not view.categories:
            st.info("Belum ada pengeluaran pada periode ini.")
        for share in view.categories:
            st.markdown(
                f"{category_icon(share.category)} **{share.category}** "
                f"{format_currency(share.total)} ({share.percentage:.1f}%)"
            )
            st.progress(max(0.0, min(share.percentage / 100, 1.0)))

    st.markdown("---")
    render_add_transaction(components)


def render_add_transaction(components: AppComponents):
    """Form for a new transaction. A failed save keeps the input."""
    st.markdown("#### ➕ Tambah Transaksi")

    tx_type = st.radio(
        "Jenis",
        options=list(TransactionType),
        index=1,
        format_func=lambda t: "Pemasukan" if t == TransactionType.INCOME else "Pengeluaran",
        horizontal=True,
    )

    with st.form("add_transaction", clear_on_submit=False):
        amount_text = st.text_input("Jumlah (Rp)", placeholder="1.500.000")
        description = st.text_input("Keterangan")
        category = st.selectbox(
            "Kategori",
            options=categories_for(tx_type),
            format_func=lambda c: f"{category_icon(c)} {c}",
        )
        submitted = st.form_submit_button("Simpan", type="primary")

    if not submitted:
        return

    try:
        draft = TransactionDraft(
            amount=parse_amount_input(amount_text),
            description=description,
            type=tx_type,
            category=category,
        )
    except (ValidationError, ValueError):
        st.warning("Jumlah dan keterangan wajib diisi.")
        return

    with st.spinner("Menyimpan..."):
        try:
            run_async(components.transactions.add(draft))
        except StorageError:
            st.error(components.transactions.error)
            return
    st.rerun()


def render_history_page(components: AppComponents):
    """Render every transaction, newest first."""
    st.title("🕘 Riwayat Transaksi")

    store = components.transactions
    if not store.records:
        st.info("Belum ada transaksi.")
        return

    for tx in store.records:
        col1, col2, col3 = st.columns([6, 3, 1])
        sign = "+" if tx.type == TransactionType.INCOME else "-"
        with col1:
            st.markdown(
                f"{category_icon(tx.category)} **{tx.description}**  \n"
                f"{tx.category} · {format_date(tx.date, components.tz)}"
            )
        with col2:
            st.markdown(f"**{sign} {format_currency(tx.amount)}**")
        with col3:
            if confirm_delete("tx", tx.id, "Hapus transaksi ini?"):
                try:
                    run_async(store.remove(tx.id))
                except StorageError:
                    st.error(store.error)
                else:
                    st.rerun()


def render_invoice_page(components: AppComponents):
    """Render the invoice list for one year and the create form."""
    st.title("🧾 Invoice")

    store = components.invoices
    tz = components.tz
    years = invoice_years(store.records, tz=tz)
    year = st.selectbox("Tahun", options=years, index=0)

    in_year = invoices_in_year(store.records, year, tz)
    total = invoice_summary(in_year, YearPeriod(year=year), tz).total
    st.metric(f"Total {year}", format_currency(total))

    if not in_year:
        st.info("Belum ada invoice pada tahun ini.")

    for inv in in_year:
        with st.expander(f"{inv.invoice_number} · {format_currency(inv.amount)}"):
            st.markdown(f"**{inv.description}**")
            st.markdown(f"Tanggal: {format_date(inv.date, tz)}")
            if confirm_delete("inv", inv.id, "Hapus invoice ini?", label="🗑️ Hapus"):
                try:
                    run_async(store.remove(inv.id))
                except StorageError:
                    st.error(store.error)
                else:
                    st.rerun()

    st.markdown("---")
    render_create_invoice(components)


def render_create_invoice(components: AppComponents):
    """Form for a new invoice, optionally pre-filled from an income."""
    st.markdown("#### ➕ Buat Invoice")

    store = components.invoices
    incomes = income_transactions(components.transactions.records)
    source_id = st.selectbox(
        "Ambil dari transaksi pemasukan (opsional)",
        options=[None] + [tx.id for tx in incomes],
        format_func=lambda tx_id: "-" if tx_id is None else _income_label(components, tx_id),
    )
    source = components.transactions.get(source_id) if source_id else None
    prefill = (
        invoice_draft_from_transaction(source, store.records, components.tz)
        if source else None
    )

    with st.form(f"create_invoice_{source_id}"):
        description = st.text_input(
            "Keterangan", value=prefill.description if prefill else ""
        )
        amount_text = st.text_input(
            "Jumlah (Rp)", value=str(int(prefill.amount)) if prefill else ""
        )
        invoice_day = st.date_input(
            "Tanggal",
            value=local_date(prefill.date, components.tz) if prefill else local_today(components.tz),
        )
        if prefill:
            st.caption(f"Nomor berikutnya: {prefill.invoice_number}")
        submitted = st.form_submit_button("Buat", type="primary")

    if not submitted:
        return

    if not description.strip():
        st.warning("Keterangan dan jumlah wajib diisi.")
        return
    try:
        amount = parse_amount_input(amount_text)
    except ValueError:
        st.warning("Keterangan dan jumlah wajib diisi.")
        return

    invoice_date = datetime.combine(invoice_day, time(0, 0), tzinfo=components.tz)
    with st.spinner("Menyimpan..."):
        try:
            run_async(store.create_invoice(description, amount, invoice_date))
        except ValidationError:
            st.warning("Keterangan terlalu panjang atau jumlah tidak valid.")
            return
        except StorageError:
            st.error(store.error)
            return
    st.rerun()


def _income_label(components: AppComponents, tx_id: str) -> str:
    tx = components.transactions.get(tx_id)
    if tx is None:
        return tx_id
    return f"{tx.description} · {format_currency(tx.amount)} · {format_date(tx.date, components.tz)}"


if __name__ == "__main__":
    main()
