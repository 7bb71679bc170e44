#!/usr/bin/env python3
"""
MapToPoster Web App using Streamlit
Run with: streamlit run streamlit_app.py
"""

import streamlit as st

from create_map_poster import (
    DEFAULT_DISTANCE,
    DEFAULT_THEME_NAME,
    PIPELINE_STAGES,
    PosterPipeline,
    PosterRequest,
    poster_filename,
    poster_png_bytes,
)
from geocoding import PlaceResolver
from poster_cache import CACHE_DIR
from poster_errors import PipelineSuperseded, PosterError
from themes import get_available_themes

# Page config
st.set_page_config(
    page_title="MapToPoster Generator",
    page_icon="\U0001f5fa",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .stApp { background-color: #1e1e1e; }
    .main { color: #e0e0e0; }
</style>
""", unsafe_allow_html=True)

st.title("\U0001f5fa MapToPoster Generator")
st.markdown("Create beautiful, minimalist map posters")


def get_pipeline() -> PosterPipeline:
    # One pipeline per browser session; a newer click only supersedes that session's own run
    if "pipeline" not in st.session_state:
        st.session_state.pipeline = PosterPipeline(resolver=PlaceResolver(cache_dir=CACHE_DIR))
    return st.session_state.pipeline


pipeline = get_pipeline()


# Load themes dynamically
available_themes = get_available_themes()

# Sidebar
with st.sidebar:
    st.header("Configuration")

    city = st.text_input("City", placeholder="Paris")
    country = st.text_input("Country", placeholder="France")

    st.subheader("Map Design")
    default_index = available_themes.index(DEFAULT_THEME_NAME) if DEFAULT_THEME_NAME in available_themes else 0
    theme = st.selectbox("Theme", available_themes or [DEFAULT_THEME_NAME], index=default_index)
    distance_km = st.slider("Radius (km)", 1, 30, DEFAULT_DISTANCE // 1000)

    st.subheader("Output")
    scale = st.select_slider("Export scale", options=[1, 2, 3, 4], value=2)
    st.caption("1: Screen | 2: Draft | 3-4: Print")

# Main area
if not city or not country:
    st.warning("Please enter city and country")
else:
    st.info(f"Location: {city}, {country}")

if st.button("Generate Poster", type="primary", use_container_width=True):
    if not city or not country:
        st.error("Please provide city and country")
    else:
        progress_bar = st.progress(0)
        status_text = st.empty()
        completed: list[str] = []

        def on_status(message: str) -> None:
            completed.append(message)
            progress_bar.progress(int(100 * len(completed) / (len(PIPELINE_STAGES) + 1)))
            status_text.text(message)

        request = PosterRequest(
            place=city.strip(),
            region=country.strip(),
            theme_name=theme,
            radius_m=distance_km * 1000,
        )

        with st.spinner("Generating... (30-60 seconds)"):
            try:
                result = pipeline.run(request, on_status=on_status)
            except PipelineSuperseded:
                st.warning("A newer request replaced this one.")
            except PosterError as e:
                st.error(f"Error: {e}")
            else:
                progress_bar.progress(100)
                status_text.text(f"Found: {result.place.label}")
                if result.theme_error is not None:
                    st.warning(f"{result.theme_error}. Using the default theme.")
                st.success(f"Poster generated for {city}, {country}")

                png = poster_png_bytes(result.surface, scale=scale)
                st.image(png, use_container_width=True)
                st.download_button(
                    "Download Poster",
                    data=png,
                    file_name=poster_filename(city, theme),
                    mime="image/png",
                    use_container_width=True,
                )

st.markdown("---")
st.markdown("Map data (c) OpenStreetMap contributors")
