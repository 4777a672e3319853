"""Interactive plotting utilities based on Plotly without runtime dependency."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Collection, Iterable, Optional

from .loci import Trait, locus_labels
from .population import Population
from .stats import PopulationStats

PLOTLY_CDN = "https://cdn.plot.ly/plotly-2.27.0.min.js"

TRAIT_COLORS = {
    Trait.YIELD: "#22c55e",
    Trait.RESISTANCE: "#eab308",
    Trait.HEIGHT: "#3b82f6",
}


def _write_plotly_html(fig: dict, output: str | Path) -> None:
    target = Path(output)
    target.parent.mkdir(parents=True, exist_ok=True)
    figure_json = json.dumps(fig)
    html = f"""
<!DOCTYPE html>
<html lang=\"en\">
<head>
    <meta charset=\"utf-8\" />
    <script src=\"{PLOTLY_CDN}\"></script>
    <title>Interactive plot</title>
    <style>
        html, body {{ height: 100%; margin: 0; }}
        #plot {{ width: 100%; height: 100%; }}
    </style>
</head>
<body>
    <div id=\"plot\"></div>
    <script>
        const figure = {figure_json};
        Plotly.newPlot('plot', figure.data, figure.layout, {{responsive: true}});
    </script>
</body>
</html>
"""
    target.write_text(html, encoding="utf-8")


def progress_plot(history: Iterable[PopulationStats], output: str | Path) -> None:
    entries = list(history)
    if not entries:
        raise ValueError("history must contain at least one generation")
    generations = [stats.generation for stats in entries]
    traces = []
    for trait in Trait:
        color = TRAIT_COLORS[trait]
        traces.append(
            {
                "type": "scatter",
                "mode": "lines+markers",
                "name": f"{trait.value} (phenotype)",
                "x": generations,
                "y": [stats.mean.get(trait) for stats in entries],
                "line": {"color": color},
            }
        )
        traces.append(
            {
                "type": "scatter",
                "mode": "lines",
                "name": f"{trait.value} (GEBV)",
                "x": generations,
                "y": [stats.mean_breeding_value.get(trait) for stats in entries],
                "line": {"color": color, "dash": "dot"},
            }
        )
    fig = {
        "data": traces,
        "layout": {
            "title": "Breeding Progress",
            "xaxis": {"title": "Generation", "dtick": 1},
            "yaxis": {"title": "Population mean"},
            "template": "plotly_white",
        },
    }
    _write_plotly_html(fig, output)


def trait_distribution_plot(
    population: Population,
    trait: Trait,
    output: str | Path,
    selected_ids: Optional[Collection[str]] = None,
) -> None:
    if not len(population):
        raise ValueError("population must not be empty")
    selected = set(selected_ids or ())
    rest = [plant.phenotype.get(trait) for plant in population if plant.id not in selected]
    chosen = [plant.phenotype.get(trait) for plant in population if plant.id in selected]
    traces = [
        {"type": "histogram", "name": "Population", "x": rest, "marker": {"color": "#6b7280"}, "opacity": 0.75},
    ]
    if chosen:
        traces.append(
            {"type": "histogram", "name": "Selected", "x": chosen, "marker": {"color": TRAIT_COLORS[trait]}, "opacity": 0.9}
        )
    fig = {
        "data": traces,
        "layout": {
            "title": f"F{population.generation} {trait.value} distribution",
            "barmode": "overlay",
            "xaxis": {"title": f"{trait.value} phenotype"},
            "yaxis": {"title": "Plants"},
            "template": "plotly_white",
        },
    }
    _write_plotly_html(fig, output)


def genome_heatmap(population: Population, output: str | Path) -> None:
    if not len(population):
        raise ValueError("population must not be empty")
    labels = locus_labels(len(population[0].genome))
    fig = {
        "data": [
            {
                "type": "heatmap",
                "z": [list(plant.genome.loci) for plant in population],
                "x": labels,
                "y": population.ids,
                "zmin": 0,
                "zmax": 2,
                "colorscale": [[0.0, "#1f2937"], [0.5, "#15803d"], [1.0, "#4ade80"]],
                "hovertemplate": "%{y}<br>%{x}: dosage %{z}<extra></extra>",
            }
        ],
        "layout": {
            "title": f"F{population.generation} genotype dosages",
            "xaxis": {"title": "Locus", "tickangle": 45},
            "yaxis": {"title": "Plant", "automargin": True},
            "template": "plotly_white",
        },
    }
    _write_plotly_html(fig, output)
