import matplotlib
matplotlib.use('Agg') # Use non-interactive backend
import matplotlib.pyplot as plt
import seaborn as sns
import pandas as pd

from cornbreeder.loci import Trait

TRAIT_COLORS = {
    Trait.YIELD.value: '#22c55e',
    Trait.RESISTANCE.value: '#eab308',
    Trait.HEIGHT.value: '#3b82f6',
}

def save_figure(fig, path):
    fig.savefig(path, bbox_inches='tight')
    plt.close(fig)

def plot_trait_progress(history: pd.DataFrame):
    """Plots phenotype and breeding-value means for every trait over generations."""
    fig, axes = plt.subplots(1, len(TRAIT_COLORS), figsize=(15, 4), sharex=True)
    for ax, (trait, color) in zip(axes, TRAIT_COLORS.items()):
        ax.plot(history.index, history[f'mean_{trait}'], marker='o', color=color, label='Phenotype')
        ax.plot(history.index, history[f'mean_gebv_{trait}'], linestyle='--', color=color, label='GEBV')
        ax.set_title(trait.capitalize())
        ax.set_xlabel('Generation')
        ax.legend()
    axes[0].set_ylabel('Population mean')
    fig.suptitle('Breeding Progress')
    return fig

def plot_trait_distribution(phenotypes: pd.DataFrame, trait: str, selected_ids=None):
    """Histogram of one trait with the selected parents highlighted."""
    selected = set(selected_ids or [])
    frame = phenotypes[[trait]].copy()
    frame['group'] = ['Selected' if idx in selected else 'Population' for idx in frame.index]
    fig, ax = plt.subplots(figsize=(8, 5))
    sns.histplot(
        data=frame, x=trait, hue='group', bins=20, multiple='layer', ax=ax,
        palette={'Population': '#6b7280', 'Selected': TRAIT_COLORS[trait]},
    )
    ax.set_title(f'{trait.capitalize()} Distribution')
    ax.set_xlabel(f'{trait.capitalize()} phenotype')
    ax.set_ylabel('Number of plants')
    return fig

def plot_prediction_accuracy(predictions: pd.DataFrame, trait: str):
    """Scatter of predicted GEBV against the true breeding value."""
    fig, ax = plt.subplots(figsize=(6, 6))
    sns.scatterplot(data=predictions, x='true', y='predicted', ax=ax, color=TRAIT_COLORS[trait])
    low = min(predictions['true'].min(), predictions['predicted'].min())
    high = max(predictions['true'].max(), predictions['predicted'].max())
    ax.plot([low, high], [low, high], color='red', linestyle='--')
    ax.set_xlabel('True breeding value')
    ax.set_ylabel('Predicted GEBV')
    ax.set_title(f'Genomic Prediction: {trait}')
    return fig
