import streamlit as st
import requests
import json
import os
from typing import List, Dict, Any, Tuple

import tempfile
from pathlib import Path

from receipt_records.config import load_settings
from receipt_records.pipeline import extract_records, process_document

# Leave empty to process locally; set STREAMLIT_API_URL to use a running API.
DEFAULT_API_URL = os.getenv("STREAMLIT_API_URL", "")

INVOICE_COLUMNS: List[Tuple[str, str]] = [
    ("serial", "Serial Number"),
    ("customer", "Customer Name"),
    ("product", "Product Name"),
    ("qty", "Quantity"),
    ("tax", "Tax"),
    ("total", "Total Amount"),
    ("date", "Date"),
]

PRODUCT_COLUMNS: List[Tuple[str, str]] = [
    ("name", "Product Name"),
    ("qty", "Quantity"),
    ("unitPrice", "Unit Price"),
    ("tax", "Tax"),
    ("priceWithTax", "Price with Tax"),
]

CUSTOMER_COLUMNS: List[Tuple[str, str]] = [
    ("name", "Customer Name"),
    ("qty", "Total Quantity"),
    ("unitPrice", "Unit Price"),
    ("tax", "Tax"),
    ("priceWithTax", "Total Purchase Amount"),
]


def upload_types() -> List[str]:
    """Extensions the uploader accepts; same list the API enforces."""
    return sorted(load_settings().allowed_extensions)


def process_file_locally(file: st.runtime.uploaded_file_manager.UploadedFile) -> Dict[str, Any]:
    """Process the document directly using imported modules (serverless mode)."""
    suffix = Path(file.name).suffix
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as temp_file:
        temp_path = temp_file.name
        temp_file.write(file.getvalue())

    try:
        result = process_document(temp_path, file.type, display_name=file.name)
        return result.to_dict()
    finally:
        Path(temp_path).unlink(missing_ok=True)


def send_file_to_api(file: st.runtime.uploaded_file_manager.UploadedFile, api_url: str, timeout: int = 120) -> Dict[str, Any]:
    endpoint = api_url.rstrip("/") + "/upload"
    resp = requests.post(
        endpoint,
        files={"file": (file.name, file.getvalue(), file.type or "application/octet-stream")},
        timeout=timeout,
    )
    resp.raise_for_status()
    return resp.json()


def render_table(title: str, rows: List[Dict[str, Any]], columns: List[Tuple[str, str]], empty_message: str):
    """
    Render one collection as a table keyed by named columns.
    Empty collections show a "no data" message instead of a table.
    """
    st.subheader(title)
    if not rows:
        st.info(empty_message)
        return

    table_data = [
        {header: row.get(key) for key, header in columns}
        for row in rows
    ]
    st.dataframe(table_data, use_container_width=True, hide_index=True)


def main():
    st.set_page_config(page_title="Receipt Records", layout="wide")
    st.title("Receipt Records")

    if "records" not in st.session_state:
        st.session_state.records = {"invoices": [], "products": [], "customers": []}

    # Sidebar: Backend configuration
    st.sidebar.header("Configuration")
    api_url = st.sidebar.text_input("API URL (leave empty for standalone mode)", value=DEFAULT_API_URL)
    st.sidebar.markdown("---")
    st.sidebar.write("Usage:")
    st.sidebar.markdown("1. Upload a receipt or invoice\n2. Click **Extract**\n3. Review the tabs")

    upload_tab, paste_tab = st.tabs(["Upload Document", "Paste Model Answer"])

    with upload_tab:
        uploaded_file = st.file_uploader(
            "Upload a receipt or invoice",
            type=upload_types(),
        )
        if st.button("Extract"):
            if not uploaded_file:
                st.warning("Please upload a file before clicking Extract.")
            else:
                try:
                    with st.spinner("Extracting records..."):
                        if api_url:
                            data = send_file_to_api(uploaded_file, api_url)
                        else:
                            data = process_file_locally(uploaded_file)
                    st.session_state.records = {
                        key: data.get(key) or [] for key in ("invoices", "products", "customers")
                    }
                except Exception as e:
                    st.error(f"Error: {str(e)}")

    with paste_tab:
        st.write("Paste a raw answer from the model to re-run the cleanup and projection.")
        raw_text = st.text_area("Model answer", height=250)
        if st.button("Parse"):
            if not raw_text.strip():
                st.warning("Please paste some text.")
            else:
                st.session_state.records = extract_records(raw_text).to_dict()

    records = st.session_state.records

    invoices_tab, products_tab, customers_tab = st.tabs(["Invoices", "Products", "Customers"])
    with invoices_tab:
        render_table("Invoices", records["invoices"], INVOICE_COLUMNS, "No invoices available.")
    with products_tab:
        render_table("Products", records["products"], PRODUCT_COLUMNS, "No products available.")
    with customers_tab:
        render_table("Customers", records["customers"], CUSTOMER_COLUMNS, "No customers available.")

    st.download_button(
        label="Download Records (JSON)",
        data=json.dumps(records, indent=2),
        file_name="receipt_records.json",
        mime="application/json"
    )


if __name__ == "__main__":
    main()
