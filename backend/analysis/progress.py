import numpy as np
import pandas as pd
from scipy import stats

from cornbreeder.data import history_header, history_row
from cornbreeder.loci import Trait


def history_frame(history) -> pd.DataFrame:
    """One row per generation with every tracked statistic."""
    rows = [history_row(entry) for entry in history]
    if not rows:
        raise ValueError("History is empty.")
    return pd.DataFrame(rows, columns=history_header()).set_index('generation')

def genetic_trend(frame: pd.DataFrame, trait: Trait) -> dict:
    """
    Regresses mean breeding value on generation number. The slope is the
    realised genetic gain per generation.
    """
    column = frame[f"mean_gebv_{trait.value}"]
    if len(column) < 2:
        return {"slope": 0.0, "intercept": float(column.iloc[0]), "r_value": 0.0, "p_value": 1.0}
    result = stats.linregress(column.index.to_numpy(dtype=float), column.to_numpy(dtype=float))
    return {
        key: float(value) if np.isfinite(value) else default
        for key, value, default in (
            ("slope", result.slope, 0.0),
            ("intercept", result.intercept, 0.0),
            ("r_value", result.rvalue, 0.0),
            ("p_value", result.pvalue, 1.0),
        )
    }

def run_progress_pipeline(history) -> tuple:
    frame = history_frame(history)
    trends = {trait.value: genetic_trend(frame, trait) for trait in Trait}
    return frame, trends
