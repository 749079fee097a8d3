"""
Demo Application
================
A live chart whose axes are driven by chartscale controllers.

Why is this file needed?
------------------------
It acts as the wiring root. It:
1. Creates a data source fed by a timer (a random walk).
2. Creates a pyqtgraph plot with chartscale tick axes.
3. Attaches an autoscale controller to each axis of the plot's ViewBox.
4. Starts the Qt event loop.
"""
import logging
import sys

import numpy as np
import pyqtgraph as pg
from PySide6.QtCore import QTimer

from chartscale.controller.auto import AutoScaleController
from chartscale.controller.hysteresis import Hysteresis
from chartscale.logging_config import setup_logging
from chartscale.model.data_source import PointDataSource
from chartscale.model.geometry import Axis
from chartscale.model.options import AutoScaleOptions
from chartscale.scale.linear_scale import LinearScale
from chartscale.view.axis_item import TickAxisItem
from chartscale.view.plot_host import ViewBoxHost

logger = logging.getLogger(__name__)

SAMPLE_INTERVAL_MS = 50
SAMPLES_PER_TICK = 5


def main() -> None:
    # 1. Setup Logging (CHARTSCALE_LOG_LEVEL=debug follows the controllers' decisions)
    setup_logging()

    # 2. Create the Qt Application
    app = pg.mkQApp("chartscale demo")

    # 3. Data
    rng = np.random.default_rng()
    source = PointDataSource(name="random walk")

    # 4. Plot with chartscale tick axes
    plot = pg.PlotWidget(
        title="chartscale",
        axisItems={"left": TickAxisItem("left"), "bottom": TickAxisItem("bottom")},
    )
    plot.showGrid(x=True, y=True, alpha=0.3)
    curve = plot.plot(pen=pg.mkPen(width=2))
    view_box = plot.getViewBox()

    # 5. Controllers: x follows all data, y fits the visible data and snaps to ticks
    x_host = ViewBoxHost(view_box, Axis.X, [source])
    y_host = ViewBoxHost(view_box, Axis.Y, [source])
    x_controller = AutoScaleController(AutoScaleOptions(content_padding_rel=(0.0, 0.1)))
    y_controller = AutoScaleController(AutoScaleOptions(
        content_padding_rel=0.1,
        hysteresis=Hysteresis.with_scale(LinearScale(max_count=8)),
    ))
    x_host.connect_layout_changes(x_controller.set_needs_update)
    y_host.connect_layout_changes(y_controller.set_needs_update)
    x_controller.configure(x_host)
    y_controller.configure(y_host)

    state = {"t": 0, "y": 0.0}

    def add_samples() -> None:
        steps = rng.normal(scale=1.0, size=SAMPLES_PER_TICK)
        ys = state["y"] + np.cumsum(steps)
        xs = state["t"] + np.arange(1, SAMPLES_PER_TICK + 1)
        state["t"] += SAMPLES_PER_TICK
        state["y"] = float(ys[-1])
        source.append_points(np.column_stack([xs, ys]))
        curve.setData(source.points[:, 0], source.points[:, 1])

    timer = QTimer()
    timer.timeout.connect(add_samples)
    timer.start(SAMPLE_INTERVAL_MS)

    plot.resize(900, 500)
    plot.show()
    logger.info("Demo running")

    # 6. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
