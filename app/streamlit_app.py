import html
import logging

import folium
import streamlit as st
from streamlit_folium import st_folium

# Import our scoring pipeline
import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
from qap_scorer.breakdown import PresentationModel, ScoreBreakdownView
from qap_scorer.config import AppConfig
from qap_scorer.controller import SelectionController, SelectionState
from qap_scorer.geo_selector import GeoSelector
from qap_scorer.map_annotator import MapAnnotator, MarkerLayer
from qap_scorer.models import Coordinate
from qap_scorer.score_client import ScoreClient

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def init_session_state() -> None:
    """Create the long-lived pipeline objects once per browser session"""
    if "config" not in st.session_state:
        try:
            st.session_state.config = AppConfig.from_env()
        except ValueError as e:
            st.error(f"Invalid configuration: {e}. Falling back to defaults.")
            st.session_state.config = AppConfig()
    config = st.session_state.config

    if "controller" not in st.session_state:
        st.session_state.controller = SelectionController(
            client=ScoreClient(config),
            annotator=MapAnnotator(),
            view=ScoreBreakdownView(),
            layer=MarkerLayer(),
            max_transport_retries=config.transport_retries,
        )

    if "selector" not in st.session_state:
        selector = GeoSelector(config)
        selector.on_selection(score_selection)
        st.session_state.selector = selector


def score_selection(coordinate: Coordinate) -> None:
    controller: SelectionController = st.session_state.controller
    config: AppConfig = st.session_state.config
    with st.spinner("Scoring..."):
        controller.score(coordinate, config.application_year)


def render_activity_table(model: PresentationModel) -> None:
    section = model.desirable_activities
    rows = []
    for row in section.rows:
        cells = "".join(
            f"<td>{html.escape(str(value))}</td>"
            for value in (row.category, row.name_text, row.miles_away, row.points)
        )
        rows.append(
            f"<tr class='highlight-{row.band.value}' style='background-color: {row.band.color}'>{cells}</tr>"
        )
    table = (
        "<table style='width: 100%'>"
        "<thead><tr><th>Desirable Activity</th><th>Name</th><th>Miles Away</th><th>Points</th></tr></thead>"
        f"<tbody>{''.join(rows)}</tbody></table>"
    )
    st.markdown(table, unsafe_allow_html=True)


def render_breakdown(model: PresentationModel) -> None:
    if model.pending:
        st.markdown(f"## {model.headline}")
        return

    st.markdown(f"# {model.headline}")
    st.markdown(
        f"...across 3 geographic QAP categories. See [project explainer page]({model.explainer_url}) for details."
    )

    st.markdown(f"## {model.desirable_activities.heading}")
    render_activity_table(model)

    transport = model.transportation
    st.markdown(f"## {transport.heading}")
    st.markdown(f"### {transport.tod_heading}")
    if transport.tod_line:
        st.write(transport.tod_line)
    st.markdown(f"### {transport.access_heading}")
    if transport.access_line:
        st.write(transport.access_line)

    for project in model.previous_projects:
        st.markdown(f"## {project.heading}")
        st.markdown(f"### {project.jurisdiction_heading}")
        st.write(project.jurisdiction_line)
        st.markdown(f"### {project.nearby_heading}")
        if project.nearby_line:
            st.write(project.nearby_line)
        if project.transit_hub_line:
            st.write(project.transit_hub_line)


def main():
    st.set_page_config(page_title="Georgia QAP Site Scorer", layout="wide")
    st.title("Georgia QAP Site Scorer")

    init_session_state()
    config: AppConfig = st.session_state.config
    controller: SelectionController = st.session_state.controller
    selector: GeoSelector = st.session_state.selector

    with st.sidebar:
        st.header("Setup")
        config.geocoding_api_key = st.text_input(
            "Google Maps Platform API Key",
            type="password",
            help="Used for address search (Geocoding API).",
            value=config.geocoding_api_key,
        )
        config.score_api_key = st.text_input(
            "Scoring service API key",
            type="password",
            help="Forwarded to the scoring service with every request.",
            value=config.score_api_key,
        )
        config.application_year = int(st.number_input(
            "Application year", min_value=2000, max_value=2100,
            value=config.application_year, step=1,
        ))
        st.caption(f"Scoring service: {config.score_url}")

        st.divider()
        view = selector.view
        st.caption(f"Longitude: {view.longitude:.4f} | Latitude: {view.latitude:.4f} | Zoom: {view.zoom:.2f}")

    # Address search
    with st.form("site_search"):
        address = st.text_input("Enter site address", placeholder="Enter site address")
        search_btn = st.form_submit_button("Score site", type="primary")
    searched = False
    if search_btn:
        if not config.geocoding_api_key:
            st.error("Please provide a Google Maps Platform API key to search addresses.")
        elif selector.search(address) is None:
            st.warning("No matching address found. Try a more specific address or click the map.")
        else:
            searched = True

    # Map with scored activities
    m = folium.Map(
        location=[selector.view.latitude, selector.view.longitude],
        zoom_start=int(round(selector.view.zoom)),
        tiles="CartoDB positron",
    )
    m.add_child(folium.LatLngPopup())
    # pin the site the markers and breakdown belong to, not a failed pick
    scored = controller.scored_coordinate
    if scored is not None:
        folium.Marker(
            list(scored.as_latlng()),
            popup=f"📍 Selected Site<br/>Lat: {scored.latitude:.6f}<br/>Lon: {scored.longitude:.6f}",
            tooltip="Selected site",
            icon=folium.Icon(color='red', icon='info-sign'),
        ).add_to(m)
    if controller.state == SelectionState.FAILED and controller.coordinate is not None:
        failed = controller.coordinate
        folium.Marker(
            list(failed.as_latlng()),
            popup=f"⚠️ Scoring failed<br/>Lat: {failed.latitude:.6f}<br/>Lon: {failed.longitude:.6f}",
            tooltip="Scoring failed for this site",
            icon=folium.Icon(color='gray', icon='remove-sign'),
        ).add_to(m)

    st.markdown("🗺️ **Search an address above or click the map to score a site**")
    map_data = st_folium(
        m,
        width=900,
        height=450,
        returned_objects=["last_clicked", "center", "zoom"],
        key="site_map",
        feature_group_to_add=controller.layer.to_feature_group(),
        center=[selector.view.latitude, selector.view.longitude],
        zoom=selector.view.zoom,
    )

    if map_data:
        if not searched:
            # the widget still reports the pre-search center on this run
            selector.update_view(map_data.get("center"), map_data.get("zoom"))
        clicked = map_data.get("last_clicked")
        if clicked and selector.confirm(clicked["lat"], clicked["lng"]) is not None:
            st.rerun()  # redraw with the new markers

    # Score breakdown
    if controller.coordinate is not None:
        if controller.state == SelectionState.FAILED:
            st.warning(
                f"Scoring failed: {controller.last_error}. "
                + ("Showing the last successful result." if controller.result else "Select a site to try again.")
            )
        render_breakdown(controller.presentation)


if __name__ == "__main__":
    main()
