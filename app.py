"""
Web application for the HypED Pod Trajectory Simulation

Interactive dashboard to run the simulation and plot the trajectory.
"""

import dataclasses
from typing import Any, Dict, List

import dash
from dash import dcc, html, Input, Output, State
from dash.exceptions import PreventUpdate
import numpy as np
import plotly.express as px
import plotly.graph_objs as go

from pod import (
    BrakingConfig,
    PodSimulationError,
    PodSimulator,
    Phase,
    RunConfig,
    TrajectoryResult,
    VehicleParams,
    load_lookup_tables,
    load_run_setup,
)


# Initialize Dash app
app = dash.Dash(__name__)
app.title = "HypED Pod Trajectory Simulation"

PHASE_COLORS = dict(zip([p.name for p in Phase], px.colors.qualitative.Set1))

INPUT_STYLE = {"width": "100%", "padding": "8px"}
LABEL_STYLE = {"fontWeight": "bold", "marginBottom": "5px"}

# Define app layout
app.layout = html.Div([
    html.Div([
        html.H1("HypED Pod Trajectory Simulation",
                style={"textAlign": "center", "marginBottom": "30px"}),

        html.Div([
            html.Div([
                html.Label("Lookup Table Directory:", style=LABEL_STYLE),
                dcc.Input(id="tables-input", type="text", value="Parameters", style=INPUT_STYLE),
            ], style={"width": "25%", "display": "inline-block", "marginRight": "20px"}),

            html.Div([
                html.Label("Parameter File (JSON, optional):", style=LABEL_STYLE),
                dcc.Input(id="params-input", type="text", value="", style=INPUT_STYLE),
            ], style={"width": "25%", "display": "inline-block", "marginRight": "20px"}),

            html.Div([
                html.Label("Time Step (s):", style=LABEL_STYLE),
                dcc.Input(id="dt-input", type="number", value=0.01, min=0.001, max=0.1,
                          step=0.001, style=INPUT_STYLE),
            ], style={"width": "10%", "display": "inline-block", "marginRight": "20px"}),

            html.Div([
                html.Label("Max Duration (s):", style=LABEL_STYLE),
                dcc.Input(id="tmax-input", type="number", value=120.0, min=1.0, max=600.0,
                          step=1.0, style=INPUT_STYLE),
            ], style={"width": "10%", "display": "inline-block", "marginRight": "20px"}),

            html.Button("Run Simulation", id="run-button",
                        style={"width": "15%", "padding": "10px", "fontSize": "16px",
                               "backgroundColor": "#4CAF50", "color": "white",
                               "border": "none", "borderRadius": "5px", "cursor": "pointer"})
        ], style={"marginBottom": "30px", "padding": "20px", "backgroundColor": "#f5f5f5",
                  "borderRadius": "10px"}),

        html.Div(id="status-message", style={"marginBottom": "20px", "fontSize": "14px"}),

        dcc.Loading(
            id="loading",
            type="default",
            children=[
                html.Div(id="results-container")
            ]
        )
    ], style={"maxWidth": "1400px", "margin": "0 auto", "padding": "20px"})
])


@app.callback(
    [Output("results-container", "children"), Output("status-message", "children")],
    [Input("run-button", "n_clicks")],
    [State("tables-input", "value"), State("params-input", "value"),
     State("dt-input", "value"), State("tmax-input", "value")],
)
def update_results(
    n_clicks: int | None, tables_dir: str, params_path: str, dt: float, tmax: float
) -> tuple[Any, Any]:
    """Run simulation and update results"""
    if n_clicks is None:
        raise PreventUpdate

    if not dt or dt <= 0 or not tmax or tmax <= 0:
        return [], html.Div(
            "Error: Time step and duration must be positive.",
            style={"color": "red"},
        )

    try:
        if params_path:
            params, braking, run = load_run_setup(params_path)
        else:
            params, braking, run = VehicleParams(), BrakingConfig(), RunConfig()
        run = dataclasses.replace(run, dt=dt, tmax=tmax)

        simulator = PodSimulator(params, load_lookup_tables(tables_dir), braking=braking, run=run)
        result = simulator.simulate()
    except (PodSimulationError, OSError) as e:
        return [], html.Div(f"Error: {e}", style={"color": "red"})

    status_msg = html.Div(
        f"Simulation complete! {result.termination_index} steps, "
        f"terminated by {result.termination_reason.replace('_', ' ')}.",
        style={"color": "green"},
    )
    return create_results_layout(result, simulator.analyze(result)), status_msg


def phase_traces(
    result: TrajectoryResult, values: np.ndarray, name: str, show_legend: bool = True
) -> List[go.Scatter]:
    """One line per phase so the phases are coloured separately"""
    t = result.time
    phases = np.array([p.name for p in result.phases])
    traces = []
    for phase in Phase:
        mask = phases == phase.name
        if not np.any(mask):
            continue
        traces.append(
            go.Scatter(
                x=t,
                y=np.where(mask, values, np.nan),
                mode="lines",
                name=phase.name.replace("_", " ").title(),
                legendgroup=phase.name,
                showlegend=show_legend,
                line=dict(color=PHASE_COLORS[phase.name], width=2),
                hovertemplate=f"{name}<br>Time: %{{x:.2f}}s<br>%{{y:.3f}}<extra></extra>",
            )
        )
    return traces


def trajectory_figure(
    result: TrajectoryResult, column: np.ndarray, title: str, y_title: str
) -> go.Figure:
    fig = go.Figure(phase_traces(result, column, title))
    fig.update_layout(
        title=title,
        xaxis_title="Time (s)",
        yaxis_title=y_title,
        hovermode="closest",
        height=400,
        template="plotly_white",
    )
    return fig


def create_results_layout(result: TrajectoryResult, analysis: Dict[str, Any]) -> html.Div:
    """Create the results visualization layout"""
    columns = result.as_dict()

    fig_velocity = trajectory_figure(result, columns["velocity"], "Velocity", "Velocity (m/s)")
    fig_distance = trajectory_figure(result, columns["distance"], "Distance", "Distance (m)")
    fig_rpm = trajectory_figure(result, columns["rpm"], "Wheel Speed", "RPM")
    fig_torque = trajectory_figure(result, columns["torque_motor"], "Motor Torque", "Torque (N·m)")
    fig_slip = trajectory_figure(result, columns["slips"], "Slip", "Slip (m/s)")
    fig_force = trajectory_figure(result, columns["pod_x"], "Net Pod Force", "Force (N)")

    # Power and efficiency on twin axes
    fig_power = go.Figure()
    fig_power.add_trace(go.Scatter(x=columns["time"], y=columns["power_input"] / 1000,
                                   mode="lines", name="Input power"))
    fig_power.add_trace(go.Scatter(x=columns["time"], y=columns["power"] / 1000,
                                   mode="lines", name="Output power"))
    fig_power.add_trace(go.Scatter(x=columns["time"], y=columns["power_loss"] / 1000,
                                   mode="lines", name="Power loss"))
    fig_power.add_trace(go.Scatter(x=columns["time"], y=columns["efficiency"] * 100,
                                   mode="lines", name="Efficiency", yaxis="y2",
                                   line=dict(dash="dot")))
    fig_power.update_layout(
        title="Power and Efficiency",
        xaxis_title="Time (s)",
        yaxis=dict(title="Power (kW)"),
        yaxis2=dict(title="Efficiency (%)", overlaying="y", side="right"),
        height=400,
        template="plotly_white",
    )

    # Stripe markers on the distance plot
    for index in result.stripes:
        fig_distance.add_vline(x=index * result.dt, line_width=1, line_dash="dash",
                               line_color="grey")

    summary_rows = [
        ("Duration (s)", f"{analysis['duration']:.2f}"),
        ("Distance (m)", f"{analysis['distance']:.2f}"),
        ("Max speed (m/s)", f"{analysis['max_velocity']:.2f} at {analysis['max_velocity_time']:.2f} s"),
        ("Max RPM", f"{analysis['max_rpm']:.0f}"),
        ("Max thrust per wheel (N)", f"{analysis['max_thrust_per_wheel']:.2f}"),
        ("Max motor torque (N·m)", f"{analysis['max_motor_torque']:.2f}"),
        ("Power per motor (W)", f"{analysis['power_per_motor']:.2f}"),
        ("Stripes detected", str(analysis["stripes_detected"])),
    ]
    table_rows = [html.Tr([html.Th("Quantity"), html.Th("Value")])]
    for label, value in summary_rows:
        table_rows.append(html.Tr([html.Td(label), html.Td(value)]))

    half = {"width": "48%", "display": "inline-block", "marginRight": "2%"}
    return html.Div([
        html.H2("Simulation Results", style={"marginTop": "30px", "marginBottom": "20px"}),
        html.Div([
            html.H3("Summary Table", style={"marginBottom": "15px"}),
            html.Table(
                table_rows,
                style={
                    "width": "100%",
                    "borderCollapse": "collapse",
                    "marginBottom": "30px",
                    "fontSize": "14px",
                },
            ),
        ], style={"marginBottom": "30px"}),
        html.Div([
            html.Div([dcc.Graph(figure=fig_velocity)], style=half),
            html.Div([dcc.Graph(figure=fig_distance)], style=half),
            html.Div([dcc.Graph(figure=fig_rpm)], style=half),
            html.Div([dcc.Graph(figure=fig_torque)], style=half),
            html.Div([dcc.Graph(figure=fig_slip)], style=half),
            html.Div([dcc.Graph(figure=fig_force)], style=half),
            html.Div([dcc.Graph(figure=fig_power)], style={"marginBottom": "30px"}),
        ]),
    ])


if __name__ == "__main__":
    app.run(debug=True, port=8050)
