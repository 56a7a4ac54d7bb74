import argparse
import os
import sys
from functools import partial

# Command-line flags override the PILOT_* environment before pilot_config is read
_parser = argparse.ArgumentParser(add_help=False)
_parser.add_argument("--data-dir", type=str, default=None)
_parser.add_argument("--port", type=int, default=None)
_parser.add_argument("--log-level", type=str, default=None)
_parser.add_argument("--share", action="store_true")
_args, _unknown = _parser.parse_known_args(sys.argv[1:])
if _args.data_dir is not None:
    os.environ["PILOT_DATA_DIR"] = _args.data_dir
if _args.port is not None:
    os.environ["PILOT_SERVER_PORT"] = str(_args.port)
if _args.log_level is not None:
    os.environ["PILOT_LOG_LEVEL"] = _args.log_level
if _args.share:
    os.environ["PILOT_SHARE"] = "true"

import gradio as gr

from pilot_config import LOG_FILE, LOG_LEVEL, SERVER_NAME, SERVER_PORT, SHARE
from logging_config import resolve_level, setup_logging
from storage import ensure_base_dir
from logic.logic_radar import (
    INFLUENCE_SOURCES,
    default_radar,
    load_radar_for_ui,
    update_radar_action,
)
from logic.logic_goals import CARB_FIELDS, default_goal, load_goal_for_ui, update_goal_action
from logic.logic_cockpit import (
    LOG_COLUMNS,
    add_log_action,
    cancel_clear_action,
    close_crisis_action,
    confirm_clear_action,
    load_cockpit_for_ui,
    open_crisis_action,
    request_clear_action,
    update_crisis_action,
)
from logic.logic_mission import load_mission_for_ui

from dash_board import CRISIS_PROTOCOL_TXT, DASHBOARD_TXT, PAGES, page_header

PAGE_IDS = [page_id for page_id, _, _, _ in PAGES]


def switch_page(page_name: str):
    """Return visibility updates for all main pages based on the active page name."""
    return tuple(gr.update(visible=(page_name == page_id)) for page_id in PAGE_IDS)


setup_logging(resolve_level(LOG_LEVEL), LOG_FILE)
ensure_base_dir()

_headers = {page_id: page_header(title, subtitle) for page_id, _, title, subtitle in PAGES}
_radar_defaults = default_radar()
_goal_defaults = default_goal()

with gr.Blocks(title="Pilot: self-coaching dashboard") as demo:
    gr.Markdown(DASHBOARD_TXT)

    # Tab bar; the active page only lives in the browser session
    with gr.Row():
        nav_buttons = {page_id: gr.Button(label) for page_id, label, _, _ in PAGES}

    # ========== Radar ==========
    with gr.Column(visible=True) as page_radar:
        gr.Markdown(_headers["radar"])
        fog_status = gr.Markdown("")
        fog_slider = gr.Slider(
            minimum=0,
            maximum=100,
            step=1,
            value=_radar_defaults["fog"],
            label="Densité brouillard (%)",
        )
        radar_plot = gr.BarPlot(
            x="source",
            y="level",
            y_lim=[0, 100],
            title="Influences",
            x_title="Source",
            y_title="Volume (%)",
        )
        radar_sliders = {"fog": fog_slider}
        radar_sliders["inner"] = gr.Slider(
            minimum=0,
            maximum=100,
            step=1,
            value=_radar_defaults["inner"],
            label="Voix Intérieure (Moi)",
        )
        outside_sources = [item for item in INFLUENCE_SOURCES if item[0] != "inner"]
        for row_start in range(0, len(outside_sources), 2):
            with gr.Row():
                for field, label in outside_sources[row_start:row_start + 2]:
                    radar_sliders[field] = gr.Slider(
                        minimum=0,
                        maximum=100,
                        step=1,
                        value=_radar_defaults[field],
                        label=label,
                    )
        radar_analysis = gr.Markdown("")

    # ========== Topo (goal + anchors) ==========
    with gr.Column(visible=False) as page_ascension:
        gr.Markdown(_headers["ascension"])
        goal_boxes = {}
        with gr.Row():
            goal_boxes["title"] = gr.Textbox(
                label="Objectif Sommet",
                placeholder="Mon objectif...",
                value=_goal_defaults["title"],
                scale=3,
            )
            goal_boxes["date"] = gr.Textbox(
                label="Date Cible",
                value=_goal_defaults["date"],
                scale=1,
            )
        gr.Markdown("#### Configuration Mousquetons")
        for field, label, placeholder in CARB_FIELDS:
            goal_boxes[field] = gr.Textbox(
                label=label,
                placeholder=placeholder,
                value=_goal_defaults[field],
            )
        goal_status = gr.Markdown("")

    # ========== Cockpit (log + SOS) ==========
    with gr.Column(visible=False) as page_cockpit:
        gr.Markdown(_headers["cockpit"])
        sos_btn = gr.Button("🆘 SOS CRASH · Protocole d'urgence", variant="stop")
        with gr.Column(visible=False) as crisis_card:
            close_crisis_btn = gr.Button("Fermer", size="sm")
            gr.Markdown(CRISIS_PROTOCOL_TXT)
            crisis_boxes = {
                "supportPerson": gr.Textbox(
                    label="Qui est ma personne ressource ?",
                    placeholder="Ex: Meilleur Pote...",
                ),
                "booster": gr.Textbox(
                    label="Qu'est ce qui est ridicule mais me booste ?",
                    placeholder="Ex: Chanter Céline Dion...",
                ),
            }

        gr.Markdown("### Historique +1%")
        with gr.Row():
            log_count = gr.Markdown("")
            clear_btn = gr.Button("🗑 Réinitialiser", size="sm", visible=False)
        with gr.Row(visible=False) as confirm_row:
            confirm_clear_btn = gr.Button("Confirmer", variant="stop", size="sm")
            cancel_clear_btn = gr.Button("Annuler", size="sm")
        with gr.Row():
            log_input = gr.Textbox(
                label="Nouvelle progression",
                placeholder="Aujourd'hui, j'ai...",
                scale=4,
            )
            add_log_btn = gr.Button("➕", scale=1)
        log_table = gr.Dataframe(headers=LOG_COLUMNS, interactive=False)
        cockpit_status = gr.Markdown("")

    # ========== Mission (mastery / impact matrix) ==========
    with gr.Column(visible=False) as page_mission:
        gr.Markdown(_headers["mission"])
        mission_plot = gr.ScatterPlot(
            x="maitrise",
            y="impact",
            x_lim=[0, 100],
            y_lim=[0, 100],
            x_title="Niveau Maîtrise",
            y_title="Zone d'Impact",
            title="Matrice de Gravité",
        )
        with gr.Row():
            mastery_md = gr.Markdown("")
            impact_md = gr.Markdown("")
        authorization_md = gr.Markdown("")

    page_columns = [page_radar, page_ascension, page_cockpit, page_mission]

    radar_outputs = [
        radar_sliders["inner"],
        radar_sliders["peers"],
        radar_sliders["family"],
        radar_sliders["media"],
        radar_sliders["professors"],
        fog_slider,
        fog_status,
        radar_analysis,
        radar_plot,
    ]
    goal_outputs = [goal_boxes[field] for field in ("title", "date")] + [
        goal_boxes[field] for field, _, _ in CARB_FIELDS
    ]
    cockpit_outputs = [
        log_table,
        log_count,
        clear_btn,
        crisis_boxes["supportPerson"],
        crisis_boxes["booster"],
    ]
    mission_outputs = [mission_plot, mastery_md, impact_md, authorization_md]

    page_loaders = {
        "radar": (load_radar_for_ui, radar_outputs),
        "ascension": (load_goal_for_ui, goal_outputs),
        "cockpit": (load_cockpit_for_ui, cockpit_outputs),
        "mission": (load_mission_for_ui, mission_outputs),
    }

    # ====== Event bindings ======

    # Navigation: show the page, then re-read its slices from storage
    for page_id in PAGE_IDS:
        loader, loader_outputs = page_loaders[page_id]
        nav_buttons[page_id].click(
            partial(switch_page, page_id),
            inputs=None,
            outputs=page_columns,
        ).then(
            loader,
            inputs=None,
            outputs=loader_outputs,
        )

    # Radar sliders persist on release
    for field, slider in radar_sliders.items():
        slider.release(
            partial(update_radar_action, field),
            inputs=[slider],
            outputs=[fog_status, radar_analysis, radar_plot],
        )

    # Topo fields persist as the user types
    for field, box in goal_boxes.items():
        box.input(
            partial(update_goal_action, field),
            inputs=[box],
            outputs=[goal_status],
        )

    # Cockpit: SOS card
    sos_btn.click(open_crisis_action, inputs=None, outputs=[sos_btn, crisis_card])
    close_crisis_btn.click(close_crisis_action, inputs=None, outputs=[sos_btn, crisis_card])
    for field, box in crisis_boxes.items():
        box.input(
            partial(update_crisis_action, field),
            inputs=[box],
            outputs=[cockpit_status],
        )

    # Cockpit: progress log
    add_log_outputs = [log_input, log_table, log_count, clear_btn, cockpit_status]
    add_log_btn.click(add_log_action, inputs=[log_input], outputs=add_log_outputs)
    log_input.submit(add_log_action, inputs=[log_input], outputs=add_log_outputs)

    clear_btn.click(request_clear_action, inputs=None, outputs=[confirm_row, cockpit_status])
    cancel_clear_btn.click(cancel_clear_action, inputs=None, outputs=[confirm_row, cockpit_status])
    confirm_clear_btn.click(
        confirm_clear_action,
        inputs=None,
        outputs=[confirm_row, log_table, log_count, clear_btn, cockpit_status],
    )

    # Initial page
    demo.load(load_radar_for_ui, inputs=None, outputs=radar_outputs)

if __name__ == "__main__":
    demo.launch(server_name=SERVER_NAME, server_port=SERVER_PORT, share=SHARE)
