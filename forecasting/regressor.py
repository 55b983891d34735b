"""
Small feed-forward regressor mapping a lag window to the next value.

Shared by the ARIMA and GARCH forecasting paths. Training runs a fixed
number of epochs with fixed-size shuffled mini-batches; there is no early
stopping and no validation split.
"""

import logging
from typing import List, Optional, Sequence
import numpy as np
import torch
import torch.nn as nn
import torch.optim as optim
from torch.utils.data import DataLoader, TensorDataset

from config import HIDDEN_UNITS, BATCH_SIZE, LEARNING_RATE, ARIMA_EPOCHS
from exceptions import InsufficientData

logger = logging.getLogger(__name__)

class LagNetwork(nn.Module):
    """Dense(hidden, relu) -> Dense(1), optionally ReLU on the output"""

    def __init__(self, n_lags: int, hidden_units: int = HIDDEN_UNITS, non_negative: bool = False):
        super().__init__()
        layers = [
            nn.Linear(n_lags, hidden_units),
            nn.ReLU(),
            nn.Linear(hidden_units, 1),
        ]
        if non_negative:
            layers.append(nn.ReLU())
        self.net = nn.Sequential(*layers)
        self.apply(self._init_weights)

    @staticmethod
    def _init_weights(m):
        if isinstance(m, nn.Linear):
            nn.init.xavier_uniform_(m.weight)
            nn.init.zeros_(m.bias)

    def forward(self, x):
        return self.net(x)

class LagRegressor:
    """Trainable regressor with a fit/predict interface"""

    def __init__(self, n_lags: int,
                 epochs: int = ARIMA_EPOCHS,
                 batch_size: int = BATCH_SIZE,
                 hidden_units: int = HIDDEN_UNITS,
                 learning_rate: float = LEARNING_RATE,
                 non_negative: bool = False,
                 random_seed: Optional[int] = None):
        """
        Initialize regressor

        Args:
            n_lags: Width of the input window
            epochs: Number of full passes over the training set
            batch_size: Mini-batch size
            hidden_units: Width of the hidden ReLU layer
            learning_rate: Adam step size
            non_negative: Apply ReLU to the output (variance targets)
            random_seed: Seed for weight init and batch shuffling; None for fresh randomness
        """
        self.n_lags = n_lags
        self.epochs = epochs
        self.batch_size = batch_size
        self.learning_rate = learning_rate
        self.non_negative = non_negative
        self.random_seed = random_seed
        self.losses: List[float] = []

        if random_seed is not None:
            with torch.random.fork_rng(devices=[]):
                torch.manual_seed(random_seed)
                self.model = LagNetwork(n_lags, hidden_units, non_negative)
        else:
            self.model = LagNetwork(n_lags, hidden_units, non_negative)

        self.logger = logging.getLogger('forecasting.regressor')

    def fit(self, features: np.ndarray, targets: np.ndarray) -> 'LagRegressor':
        """Minimise mean squared error for a fixed number of epochs"""
        X = torch.from_numpy(np.asarray(features, dtype=np.float32))
        y = torch.from_numpy(np.asarray(targets, dtype=np.float32).reshape(-1, 1))
        if X.shape[0] == 0:
            raise InsufficientData("No training rows for regressor")

        generator = torch.Generator()
        if self.random_seed is not None:
            generator.manual_seed(self.random_seed)
        else:
            generator.seed()
        loader = DataLoader(TensorDataset(X, y), batch_size=self.batch_size,
                            shuffle=True, drop_last=False, generator=generator)

        mse = nn.MSELoss()
        optimizer = optim.Adam(self.model.parameters(), lr=self.learning_rate)

        self.losses = []
        self.model.train()
        for epoch in range(self.epochs):
            tot = 0.0
            for xb, yb in loader:
                optimizer.zero_grad(set_to_none=True)
                loss = mse(self.model(xb), yb)
                loss.backward()
                optimizer.step()
                tot += float(loss.item()) * len(xb)
            avg = tot / len(X)
            self.losses.append(avg)
            self.logger.debug(f"Epoch {epoch + 1}/{self.epochs} | Loss {avg:.6f}")

        if self.losses:
            self.logger.info(
                f"Trained {self.n_lags}-lag regressor on {len(X)} rows: "
                f"{self.epochs} epochs, final loss {self.losses[-1]:.6f}"
            )
        return self

    def predict(self, features: np.ndarray) -> np.ndarray:
        X = torch.from_numpy(np.atleast_2d(np.asarray(features, dtype=np.float32)))
        self.model.eval()
        with torch.no_grad():
            out = self.model(X).squeeze(-1).numpy()
        return out.astype(float)

def recursive_forecast(regressor, seed_window: Sequence[float], steps: int) -> np.ndarray:
    """
    Multi-step forecast feeding each prediction back into the window.

    Args:
        regressor: Any object with predict(features) -> array
        seed_window: Last `lag` observations, oldest first
        steps: Number of predictions to produce

    Returns:
        Array of `steps` predictions
    """
    window = [float(v) for v in seed_window]
    predictions = []
    for _ in range(steps):
        value = float(regressor.predict(np.array([window]))[0])
        predictions.append(value)
        window = window[1:] + [value]
    return np.array(predictions)
