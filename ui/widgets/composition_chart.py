from __future__ import annotations

from typing import Any, Dict, List

from PySide6.QtCharts import QChart, QChartView, QPieSeries, QPieSlice
from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QPainter

from config.constants import CHART_LABEL_MIN_PERCENT

EMPTY_TITLE = "블렌드를 구성하면 화학 구성 비율을 여기에 표시합니다."


class CompositionChart(QChartView):
    """Pie chart of the blend composition, coloured by chemical family."""

    def __init__(self, parent=None) -> None:
        self._chart = QChart()
        super().__init__(self._chart, parent)
        self.setRenderHint(QPainter.Antialiasing)
        self.setMinimumHeight(360)

        self._chart.legend().setAlignment(Qt.AlignRight)
        self._chart.setAnimationOptions(QChart.SeriesAnimations)
        self.set_slices([])

    def set_slices(self, slices: List[Dict[str, Any]]) -> None:
        """Replace chart contents.

        Args:
            slices: Dicts with name, value (percent) and color keys
        """
        self._chart.removeAllSeries()

        if not slices:
            self._chart.setTitle(EMPTY_TITLE)
            self._chart.legend().hide()
            return

        self._chart.setTitle("")
        series = QPieSeries()
        series.setPieSize(0.8)
        for entry in slices:
            pie_slice = series.append(f"{entry['name']} ({entry['value']:.2f}%)", entry["value"])
            pie_slice.setColor(QColor(entry["color"]))
            pie_slice.setLabelColor(QColor("white"))
            pie_slice.setLabelPosition(QPieSlice.LabelInsideNormal)

        self._chart.addSeries(series)
        self._chart.legend().show()

        for pie_slice in series.slices():
            percent = pie_slice.percentage() * 100
            pie_slice.setLabel(f"{percent:.0f}%")
            pie_slice.setLabelVisible(percent >= CHART_LABEL_MIN_PERCENT)

        markers = self._chart.legend().markers(series)
        for marker, entry in zip(markers, slices):
            marker.setLabel(f"{entry['name']} ({entry['value']:.2f}%)")
