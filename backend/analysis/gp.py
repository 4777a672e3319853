import numpy as np
import pandas as pd
from sklearn.linear_model import Ridge
from sklearn.model_selection import KFold, cross_val_predict
from sklearn.metrics import r2_score, mean_squared_error

from cornbreeder.loci import Trait, locus_labels
from cornbreeder.population import Population


def _finite(value) -> float:
    """Undefined metrics (constant predictions, tiny folds) are reported as 0."""
    value = float(value)
    return value if np.isfinite(value) else 0.0

def dosage_matrix(population: Population) -> pd.DataFrame:
    """Genotype matrix: one row per plant, one 0/1/2 dosage column per locus."""
    if not len(population):
        raise ValueError("Population is empty.")
    labels = locus_labels(len(population[0].genome))
    rows = [list(plant.genome.loci) for plant in population]
    return pd.DataFrame(rows, index=population.ids, columns=labels, dtype=float)

def trait_matrix(population: Population, use_breeding_value: bool = False) -> pd.DataFrame:
    """Phenotypes (or true breeding values) with one column per trait."""
    records = {
        plant.id: (plant.breeding_value if use_breeding_value else plant.phenotype).to_dict()
        for plant in population
    }
    return pd.DataFrame.from_dict(records, orient='index')[[trait.value for trait in Trait]]

def calculate_grm(X: pd.DataFrame) -> pd.DataFrame:
    """
    VanRaden genomic relationship matrix from 0/1/2 dosages:
    G = ZZ' / 2 sum p(1-p), with Z the dosages centred on twice the allele frequency.
    """
    p = X.mean(axis=0).to_numpy() / 2.0
    Z = X.to_numpy() - 2.0 * p
    scale = 2.0 * float(np.sum(p * (1.0 - p)))
    if scale == 0:
        # Every locus is fixed: markers carry no relatedness information.
        G = np.eye(len(X))
    else:
        G = (Z @ Z.T) / scale
    return pd.DataFrame(G, index=X.index, columns=X.index)

def relationship_summary(G: pd.DataFrame) -> dict:
    """Mean and maximum relatedness between plants and mean genomic inbreeding (diag - 1)."""
    values = G.to_numpy()
    off_diagonal = values[~np.eye(len(values), dtype=bool)]
    return {
        "mean_relationship": _finite(off_diagonal.mean()) if off_diagonal.size else 0.0,
        "max_relationship": _finite(off_diagonal.max()) if off_diagonal.size else 0.0,
        "mean_inbreeding": _finite(np.diag(values).mean() - 1.0),
    }

def train_gblup_model(X_train: pd.DataFrame, y_train: pd.Series, n_splits=5, alpha=1.0):
    """
    Trains a ridge-regression (rrBLUP) model on marker dosages and evaluates it
    with K-fold cross-validation.
    """
    if len(X_train) < n_splits:
        raise ValueError(f"Need at least {n_splits} plants for {n_splits}-fold cross-validation.")

    model = Ridge(alpha=alpha)

    cv = KFold(n_splits=n_splits, shuffle=True, random_state=42)
    y_pred_cv = cross_val_predict(model, X_train, y_train, cv=cv)

    rmse = np.sqrt(mean_squared_error(y_train, y_pred_cv))
    if np.std(y_pred_cv) == 0 or np.std(y_train) == 0:
        pearson_r = 0.0
    else:
        pearson_r = np.corrcoef(y_train, y_pred_cv)[0, 1]

    cv_results = {
        "r2": _finite(r2_score(y_train, y_pred_cv)),
        "rmse": _finite(rmse),
        "pearson_r": _finite(pearson_r),
    }

    # Fit final model on all training data
    model.fit(X_train, y_train)

    return model, cv_results

def predict_gebv(model: Ridge, X_predict: pd.DataFrame):
    """Predicts GEBVs for a set of plants."""
    gebvs = model.predict(X_predict)
    return pd.Series(gebvs, index=X_predict.index)

def run_gp_pipeline(population: Population, request: dict):
    """
    Trains a genomic predictor on observed phenotypes of one generation and
    scores its accuracy against the plants' true breeding values.
    """
    trait = Trait(request['trait'])
    X = dosage_matrix(population)
    y = trait_matrix(population)[trait.value]
    true_bv = trait_matrix(population, use_breeding_value=True)[trait.value]

    model, cv_results = train_gblup_model(
        X, y, n_splits=request.get('k_folds', 5), alpha=request.get('alpha', 1.0)
    )
    predicted = predict_gebv(model, X)

    if predicted.std() == 0 or true_bv.std() == 0:
        accuracy = 0.0
    else:
        accuracy = _finite(np.corrcoef(predicted, true_bv)[0, 1])

    predictions = pd.DataFrame({"predicted": predicted, "true": true_bv, "phenotype": y})
    return model, cv_results, accuracy, predictions
