"""Editor window: pick an image, tune the parameters, preview and save."""

from __future__ import annotations

from pathlib import Path

from PyQt6.QtCore import Qt, QThread, pyqtSignal
from PyQt6.QtGui import QImage, QPixmap
from PyQt6.QtWidgets import (
    QFileDialog,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from ..config_manager import ConfigManager
from ..errors import TilerError
from ..image_processing import SUPPORTED_INPUT_EXTENSIONS, ImageProcessor
from ..models import EditorParameters, RasterImage, SliceSet
from .helpers import describe_slices, fit_within

PREVIEW_MAX_SIZE = (480, 360)
SLICE_THUMB_MAX_SIZE = (120, 160)


def raster_to_pixmap(image: RasterImage, bounds: "tuple[int, int]") -> QPixmap:
    """Convert a RasterImage to a QPixmap scaled to fit bounds."""
    qimage = QImage(
        image.buffer,
        image.width,
        image.height,
        image.width * 4,
        QImage.Format.Format_RGBA8888,
    ).copy()
    width, height = fit_within(image.size, bounds)
    return QPixmap.fromImage(qimage).scaled(
        width,
        height,
        Qt.AspectRatioMode.KeepAspectRatio,
        Qt.TransformationMode.SmoothTransformation,
    )


class ProcessingThread(QThread):
    """Background thread running the pipeline to avoid blocking UI."""

    finished_ok = pyqtSignal(object, object)  # SliceSet, RasterImage
    error = pyqtSignal(str)  # Error message

    def __init__(
        self,
        processor: ImageProcessor,
        source: RasterImage,
        params: EditorParameters,
    ):
        super().__init__()
        self.processor = processor
        self.source = source
        self.params = params

    def run(self):
        """Execute slicing preview and full render in background."""
        try:
            slices = self.processor.preview_slices(self.source, self.params)
            output = self.processor.render(self.source, self.params)
            self.finished_ok.emit(slices, output)
        except TilerError as e:
            self.error.emit(str(e))


class EditorWindow(QMainWindow):
    """Main window wrapping the pipeline with a minimal form."""

    def __init__(self, config_manager: ConfigManager, parent: QWidget | None = None):
        super().__init__(parent)
        self.config_manager = config_manager
        self.config = config_manager.load()
        self.processor = ImageProcessor(self.config)

        self.source: RasterImage | None = None
        self.rendered: RasterImage | None = None
        self.processing_thread: ProcessingThread | None = None
        # AIDEV-NOTE: Requests made while a run is in flight replace each
        # other here; only the latest one starts when the worker is free.
        self._pending_params: EditorParameters | None = None

        self.setWindowTitle("Accordion Tiler")
        self._setup_ui()
        self._connect_signals()

    def _setup_ui(self):
        """Initialize the UI components."""
        central = QWidget()
        layout = QVBoxLayout(central)

        # --- Source selection ---
        file_layout = QHBoxLayout()
        self.file_path_label = QLabel("No image selected")
        self.file_path_label.setWordWrap(True)
        file_layout.addWidget(self.file_path_label, stretch=1)
        self.browse_btn = QPushButton("Browse...")
        file_layout.addWidget(self.browse_btn)
        layout.addLayout(file_layout)

        # --- Parameters ---
        params_group = QGroupBox("Parameters")
        form = QFormLayout()
        params = self.config.parameters
        self.scale_edit = QLineEdit(f"{params.scale:g}")
        self.splits_edit = QLineEdit(str(params.num_splits))
        self.repeat_edit = QLineEdit(str(params.horizontal_repeat))
        form.addRow("Scale (Multiplier):", self.scale_edit)
        form.addRow("Number of Splits:", self.splits_edit)
        form.addRow("Horizontal Repeat Count:", self.repeat_edit)
        params_group.setLayout(form)
        layout.addWidget(params_group)

        # --- Slice strip (read-only view of the slicer output) ---
        self.slice_strip = QWidget()
        self.slice_strip_layout = QHBoxLayout(self.slice_strip)
        self.slice_strip_layout.setAlignment(Qt.AlignmentFlag.AlignLeft)
        slice_scroll = QScrollArea()
        slice_scroll.setWidgetResizable(True)
        slice_scroll.setWidget(self.slice_strip)
        slice_scroll.setMinimumHeight(SLICE_THUMB_MAX_SIZE[1] + 40)
        layout.addWidget(slice_scroll)

        # --- Output preview ---
        self.preview_label = QLabel("Output preview will appear here")
        self.preview_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.preview_label.setMinimumSize(*SLICE_THUMB_MAX_SIZE)
        self.preview_label.setStyleSheet(
            "border: 1px solid gray; background-color: lightgray;"
        )
        layout.addWidget(self.preview_label, stretch=1)

        # --- Actions ---
        button_layout = QHBoxLayout()
        self.preview_btn = QPushButton("Preview")
        self.preview_btn.setEnabled(False)
        button_layout.addWidget(self.preview_btn)
        self.download_btn = QPushButton("Download")
        self.download_btn.setEnabled(False)
        button_layout.addWidget(self.download_btn)
        layout.addLayout(button_layout)

        self.status_label = QLabel("Select an image to begin.")
        self.status_label.setWordWrap(True)
        layout.addWidget(self.status_label)

        self.setCentralWidget(central)

    def _connect_signals(self):
        self.browse_btn.clicked.connect(self._on_browse_clicked)
        self.preview_btn.clicked.connect(self._on_preview_clicked)
        self.download_btn.clicked.connect(self._on_download_clicked)
        for edit in (self.scale_edit, self.splits_edit, self.repeat_edit):
            edit.returnPressed.connect(self._on_preview_clicked)

    # === Event Handlers ===

    def _on_browse_clicked(self):
        patterns = " ".join(f"*{ext}" for ext in sorted(SUPPORTED_INPUT_EXTENSIONS))
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Select Image", "", f"Images ({patterns});;All Files (*)"
        )
        if file_path:
            self._load_image(file_path)

    def _load_image(self, file_path: str):
        try:
            self.source = self.processor.load_image(file_path)
        except TilerError as e:
            self.status_label.setText(f"Error: {e}")
            return
        self.rendered = None
        self.file_path_label.setText(f"Selected: {Path(file_path).name}")
        self.preview_btn.setEnabled(True)
        self.download_btn.setEnabled(False)
        self.status_label.setText(
            f"Loaded {self.source.width}x{self.source.height} image."
        )
        self._on_preview_clicked()

    def current_parameters(self) -> EditorParameters:
        """Read the form; unusable values clamp to 1 and are echoed back."""
        params = EditorParameters(
            scale=self.scale_edit.text(),
            num_splits=self.splits_edit.text(),
            horizontal_repeat=self.repeat_edit.text(),
        )
        self.scale_edit.setText(f"{params.scale:g}")
        self.splits_edit.setText(str(params.num_splits))
        self.repeat_edit.setText(str(params.horizontal_repeat))
        return params

    def _on_preview_clicked(self):
        if self.source is None:
            return
        params = self.current_parameters()
        if self.processing_thread is not None and self.processing_thread.isRunning():
            self._pending_params = params
            return
        self._start_processing(params)

    def _start_processing(self, params: EditorParameters):
        self.status_label.setText("Processing...")
        self.download_btn.setEnabled(False)
        self.processing_thread = ProcessingThread(self.processor, self.source, params)
        self.processing_thread.finished_ok.connect(self._on_processing_finished)
        self.processing_thread.error.connect(self._on_processing_error)
        self.processing_thread.finished.connect(self._start_pending)
        self.processing_thread.start()

    def _start_pending(self):
        if self._pending_params is not None:
            params, self._pending_params = self._pending_params, None
            self._start_processing(params)

    def _on_processing_finished(self, slices: SliceSet, output: RasterImage):
        self.rendered = output
        self._show_slices(slices)
        self.preview_label.setPixmap(raster_to_pixmap(output, PREVIEW_MAX_SIZE))
        self.download_btn.setEnabled(True)
        self.status_label.setText(
            f"{describe_slices(slices)} -> {output.width}x{output.height} output"
        )

    def _on_processing_error(self, error_msg: str):
        self.rendered = None
        self.preview_label.clear()
        self.preview_label.setText("No preview")
        pretty_msg = error_msg.replace("\n", " ").strip()
        self.status_label.setText(f"Error: {pretty_msg}")

    def _show_slices(self, slices: SliceSet):
        while self.slice_strip_layout.count():
            item = self.slice_strip_layout.takeAt(0)
            if item.widget():
                item.widget().deleteLater()
        for index, piece in enumerate(slices, start=1):
            cell = QVBoxLayout()
            thumb = QLabel()
            thumb.setPixmap(raster_to_pixmap(piece, SLICE_THUMB_MAX_SIZE))
            cell.addWidget(thumb)
            cell.addWidget(QLabel(f"Slice {index}"))
            wrapper = QWidget()
            wrapper.setLayout(cell)
            self.slice_strip_layout.addWidget(wrapper)

    def _on_download_clicked(self):
        if self.rendered is None:
            return
        file_path, _ = QFileDialog.getSaveFileName(
            self, "Save Image", self.config.output_filename, "Images (*.png *.webp)"
        )
        if not file_path:
            return
        try:
            data = self.processor.encode(self.rendered)
            Path(file_path).write_bytes(data)
        except (TilerError, OSError) as e:
            self.status_label.setText(f"Error: {e}")
            return
        self.status_label.setText(f"Saved {Path(file_path).name}")
