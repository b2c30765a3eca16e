import os
import requests
import pandas as pd
import altair as alt
import streamlit as st

API = os.getenv("API_URL", "http://127.0.0.1:8000")

# Display bands per bucket; Normal's band comes from the chart data itself.
BANDS = {
    "Underweight": (10.0, 18.5, "#3b82f6"),
    "Normal": (18.5, 24.9, "#22c55e"),
    "Overweight": (25.0, 29.9, "#eab308"),
    "Obese": (30.0, 45.0, "#dc2626"),
}

DEFAULTS = {
    "metric": {"weight": 70.0, "height": 1.75},
    "imperial": {"weight": 150.0, "feet": 5, "inches": 9},
}

st.set_page_config(page_title="BMI Insights", page_icon="⚖️", layout="centered")
st.title("BMI Insights")
st.caption("Calculate your BMI and get a visual interpretation of your result.")

# --- Initial state ---
if "result" not in st.session_state:
    st.session_state.result = None

def chart_frame(chart_data):
    rows = []
    for entry in chart_data:
        start, end, color = BANDS[entry["name"]]
        if "range" in entry:
            start, end = entry["range"]
        rows.append({
            "bucket": entry["name"],
            "start": start,
            "end": end,
            "color": color,
            "yours": "bmi" in entry,
        })
    return pd.DataFrame(rows)

def bmi_chart(chart_data, bmi):
    df = chart_frame(chart_data)
    order = [e["name"] for e in chart_data]
    bars = alt.Chart(df).mark_bar(height=28).encode(
        x=alt.X("start:Q", title="BMI", scale=alt.Scale(domain=[10, 45])),
        x2="end:Q",
        y=alt.Y("bucket:N", sort=order, title=None),
        color=alt.Color("color:N", scale=None),
        opacity=alt.condition(alt.datum.yours, alt.value(1.0), alt.value(0.35)),
        tooltip=["bucket", "start", "end"],
    )
    marker = alt.Chart(pd.DataFrame({"bmi": [min(bmi, 45.0)]})).mark_rule(
        color="black", strokeWidth=3
    ).encode(x="bmi:Q")
    return (bars + marker).properties(height=200)

def submit(payload):
    st.session_state.result = None
    try:
        with st.spinner("Calculating BMI and generating advice..."):
            r = requests.post(f"{API}/assess", json=payload, timeout=90)
        if r.status_code in (422, 502):
            detail = r.json().get("detail")
            st.error(detail if isinstance(detail, str) else "Please check your inputs.")
            return
        r.raise_for_status()
        st.session_state.result = r.json()
    except requests.RequestException as e:
        st.error(f"Could not get BMI advice. Please try again later. ({e})")

# --- Form ---
metric_tab, imperial_tab = st.tabs(["Metric (kg, m)", "Imperial (lbs, ft/in)"])

with metric_tab:
    with st.form("metric"):
        weight = st.number_input("Weight (kg)", min_value=0.0, value=DEFAULTS["metric"]["weight"], step=0.1)
        height = st.number_input("Height (m)", min_value=0.0, value=DEFAULTS["metric"]["height"], step=0.01)
        if st.form_submit_button("Calculate BMI"):
            submit({"unit_system": "metric", "weight": weight, "height": height})

with imperial_tab:
    with st.form("imperial"):
        weight_lb = st.number_input("Weight (lbs)", min_value=0.0, value=DEFAULTS["imperial"]["weight"], step=0.1)
        c1, c2 = st.columns(2)
        feet = c1.number_input("Feet", min_value=0, value=DEFAULTS["imperial"]["feet"], step=1)
        inches = c2.number_input("Inches", min_value=0, max_value=11, value=DEFAULTS["imperial"]["inches"], step=1)
        if st.form_submit_button("Calculate BMI"):
            submit({"unit_system": "imperial", "weight": weight_lb, "feet": feet, "inches": inches})

if st.button("Clear"):
    st.session_state.result = None

# --- Result ---
result = st.session_state.result
if result:
    st.subheader("Your Result")
    st.metric("BMI", f"{result['bmi']:.2f}")
    st.write(f"**{result['category']}**")

    advice = result["advice"]
    st.altair_chart(bmi_chart(advice["chartData"], result["bmi"]), use_container_width=True)

    st.subheader("Personalized Advice")
    st.write(advice["personalizedAdvice"])
    st.caption(
        "Disclaimer: This is not medical advice. Consult with a healthcare professional "
        "for personalized health guidance."
    )
