#!/usr/bin/env python3
"""
GUI Application Module

This module provides the desktop interface using tkinter, with drag-and-drop
via tkinterdnd2 when it is installed. The window shows the selected images as
thumbnails, the exclusion dictionary status, a progress bar while OCR runs and
the recognized text, which can be copied or saved.

OCR runs on a BatchWorker thread; the window polls the worker's queue and
applies each event to the AppState.
"""

import logging
import tkinter as tk
from pathlib import Path
from tkinter import ttk, filedialog, messagebox, scrolledtext
from typing import Dict, Optional

import cv2
from PIL import Image, ImageTk

try:
    from tkinterdnd2 import TkinterDnD, DND_FILES
    TKINTERDND_AVAILABLE = True
except ImportError:
    TKINTERDND_AVAILABLE = False
    logging.getLogger(__name__).warning(
        "tkinterdnd2 not available. Drag-and-drop functionality will be disabled. Install with: pip install tkinterdnd2"
    )

from .batch import BatchWorker
from .clipboard import copy_to_clipboard
from .config import Config
from .exceptions import OCREngineNotAvailableError, describe_error
from .images import SUPPORTED_EXTENSIONS, SelectedImage
from .ocr_engine import OCREngine
from .state import AppState

logger = logging.getLogger(__name__)

THUMBNAIL_SIZE = (150, 150)
PREVIEW_SIZE = (760, 520)
POLL_INTERVAL_MS = 100


def to_photo_image(image: SelectedImage, size) -> ImageTk.PhotoImage:
    """Scale a decoded image down to fit `size` for display."""
    pil_image = Image.fromarray(cv2.cvtColor(image.pixels, cv2.COLOR_BGR2RGB))
    pil_image.thumbnail(size)
    return ImageTk.PhotoImage(pil_image)


class OCRGUIApp:
    """
    Main GUI application class for OCR processing.

    Features:
    - Multi-image selection with thumbnails, removal and full-size preview
    - Exclusion dictionary selection
    - Progress indication during processing
    - Results display with copy and save functionality
    """

    def __init__(self, root: tk.Tk, config: Optional[Config] = None):
        self.root = root
        self.root.title("WikiOCR")
        self.root.geometry("800x650")
        self.root.minsize(600, 500)

        self.config = config or Config()
        self.state = AppState()
        config_error = None
        try:
            self.engine = self.config.build_engine()
        except ValueError as e:
            logger.warning(f"Invalid OCR settings, using defaults: {e}")
            config_error = e
            self.engine = OCREngine()
        self.worker = BatchWorker(self.engine)

        # Tk drops PhotoImages that are not referenced from Python
        self._thumbnails: Dict[object, ImageTk.PhotoImage] = {}
        self._preview_photo: Optional[ImageTk.PhotoImage] = None
        self._preview_window: Optional[tk.Toplevel] = None
        self._updating_text = False

        self.setup_ui()

        if TKINTERDND_AVAILABLE:
            self.setup_drag_drop()

        if self.config.dictionary_path:
            self.load_dictionary(self.config.dictionary_path)

        if config_error is not None:
            messagebox.showerror("Configuration", f"{config_error}\n\nDefault OCR settings are used for this session.")

        if not self.engine.is_available():
            error = OCREngineNotAvailableError([self.engine.engine])
            messagebox.showwarning("OCR Engine", describe_error(error))

        self.refresh()
        self.root.after(POLL_INTERVAL_MS, self.process_queue)

    def setup_ui(self):
        """Setup the main user interface."""
        main_frame = ttk.Frame(self.root, padding="10")
        main_frame.pack(fill=tk.BOTH, expand=True)

        # Thumbnail strip
        strip_frame = ttk.LabelFrame(main_frame, text="Selected Images", padding="5")
        strip_frame.pack(fill=tk.X, pady=(0, 10))

        self.strip_canvas = tk.Canvas(strip_frame, height=THUMBNAIL_SIZE[1] + 20, highlightthickness=0)
        strip_scroll = ttk.Scrollbar(strip_frame, orient=tk.HORIZONTAL, command=self.strip_canvas.xview)
        self.strip_canvas.configure(xscrollcommand=strip_scroll.set)
        self.strip_canvas.pack(fill=tk.X, expand=True)
        strip_scroll.pack(fill=tk.X)

        self.strip_inner = ttk.Frame(self.strip_canvas)
        self.strip_canvas.create_window((0, 0), window=self.strip_inner, anchor=tk.NW)
        self.strip_inner.bind(
            '<Configure>',
            lambda e: self.strip_canvas.configure(scrollregion=self.strip_canvas.bbox("all"))
        )

        self.empty_label = ttk.Label(self.strip_inner,
                                     text="Click 'Select Images' or drop PNG/JPEG files here")

        # Dictionary
        dict_frame = ttk.Frame(main_frame)
        dict_frame.pack(fill=tk.X, pady=(0, 10))

        self.dictionary_label = ttk.Label(dict_frame, text="", foreground="gray")
        self.dictionary_label.pack(side=tk.LEFT)

        self.dictionary_button = ttk.Button(dict_frame, text="Select Dictionary File",
                                            command=self.browse_dictionary)
        self.dictionary_button.pack(side=tk.RIGHT)

        # Progress bar, only shown while processing
        self.progress_holder = ttk.Frame(main_frame)
        self.progress_holder.pack(fill=tk.X)
        self.progress_var = tk.DoubleVar()
        self.progress_bar = ttk.Progressbar(self.progress_holder, variable=self.progress_var,
                                            maximum=100, mode='determinate')

        # Results text area
        results_frame = ttk.LabelFrame(main_frame, text="Recognized Text", padding="10")
        results_frame.pack(fill=tk.BOTH, expand=True, pady=(10, 10))

        self.results_text = scrolledtext.ScrolledText(results_frame, wrap=tk.WORD, font=("Courier", 11))
        self.results_text.pack(fill=tk.BOTH, expand=True)
        self.results_text.bind('<<Modified>>', self.on_text_modified)

        # Control buttons
        button_frame = ttk.Frame(main_frame)
        button_frame.pack(fill=tk.X)

        self.browse_button = ttk.Button(button_frame, text="Select Images", command=self.browse_images)
        self.browse_button.pack(side=tk.LEFT, padx=(0, 10))

        self.run_button = ttk.Button(button_frame, text="Run OCR", command=self.run_ocr)
        self.run_button.pack(side=tk.LEFT)

        self.save_button = ttk.Button(button_frame, text="Save Result", command=self.save_results)
        self.save_button.pack(side=tk.RIGHT)

        self.copy_button = ttk.Button(button_frame, text="Copy Result", command=self.copy_results)
        self.copy_button.pack(side=tk.RIGHT, padx=(0, 10))

    def setup_drag_drop(self):
        """Setup drag and drop functionality."""
        self.strip_canvas.drop_target_register(DND_FILES)
        self.strip_canvas.dnd_bind('<<Drop>>', self.on_drop)

    def on_drop(self, event):
        """Handle file drop event."""
        paths = [Path(p) for p in self.root.splitlist(event.data)]
        images = [p for p in paths if p.suffix.lower() in SUPPORTED_EXTENSIONS]
        if len(images) != len(paths):
            logger.warning(f"Ignored {len(paths) - len(images)} unsupported dropped file(s)")
        if images:
            self.state.add_images(images)
            self.refresh()

    # Images

    def browse_images(self):
        """Open the image picker. A new selection replaces the current one."""
        filetypes = [
            ('Image files', '*.png *.jpg *.jpeg'),
            ('PNG', '*.png'),
            ('JPEG', '*.jpg *.jpeg'),
        ]
        filenames = filedialog.askopenfilenames(title="Select images", filetypes=filetypes)
        if filenames:
            self.state.select_images(filenames)
            self.refresh()

    def remove_image(self, image_id):
        self.state.remove_image(image_id)
        self.refresh()

    def render_thumbnails(self):
        for child in self.strip_inner.winfo_children():
            if child is not self.empty_label:
                child.destroy()
        self._thumbnails.clear()

        if not self.state.selected_images:
            self.empty_label.pack(padx=20, pady=40)
            return
        self.empty_label.pack_forget()

        for image in self.state.selected_images:
            cell = ttk.Frame(self.strip_inner, padding=4)
            cell.pack(side=tk.LEFT)

            if image.is_decoded:
                photo = to_photo_image(image, THUMBNAIL_SIZE)
                self._thumbnails[image.id] = photo
                thumb = ttk.Label(cell, image=photo, cursor="hand2")
                thumb.bind('<Button-1>', lambda e, image_id=image.id: self.show_preview(image_id))
            else:
                thumb = ttk.Label(cell, text=f"{image.name}\n(could not load)",
                                  width=20, anchor=tk.CENTER, justify=tk.CENTER)
            thumb.pack()

            remove = ttk.Button(cell, text="✕", width=2,
                                command=lambda image_id=image.id: self.remove_image(image_id))
            remove.place(relx=1.0, rely=0.0, anchor=tk.NE)

    # Preview overlay

    def show_preview(self, image_id):
        image = self.state.open_preview(image_id)
        if image is None:
            return

        self.close_preview()
        window = tk.Toplevel(self.root, background="black")
        window.title(image.name)
        window.geometry("800x600")
        window.transient(self.root)
        window.bind('<Escape>', lambda e: self.close_preview())
        window.bind('<Button-1>', lambda e: self.close_preview() if e.widget is window else None)
        window.protocol("WM_DELETE_WINDOW", self.close_preview)

        self._preview_photo = to_photo_image(image, PREVIEW_SIZE)
        ttk.Label(window, image=self._preview_photo).pack(padx=20, pady=20, expand=True)
        ttk.Button(window, text="Close", command=self.close_preview).pack(pady=(0, 20))
        self._preview_window = window

    def close_preview(self):
        self.state.close_preview()
        if self._preview_window is not None:
            self._preview_window.destroy()
            self._preview_window = None
            self._preview_photo = None

    # Dictionary

    def browse_dictionary(self):
        try:
            filename = filedialog.askopenfilename(
                title="Select dictionary file",
                filetypes=[('Text files', '*.txt'), ('All files', '*.*')]
            )
        except tk.TclError as e:
            self.state.dictionary_selection_failed(str(e))
            self.update_status()
            return

        if filename:
            self.load_dictionary(Path(filename))

    def load_dictionary(self, path: Path):
        self.state.load_dictionary(path)
        self.update_status()

    # OCR

    def run_ocr(self):
        """Start a batch on the background worker."""
        if self.worker.is_running():
            messagebox.showwarning("Processing", "Please wait for current processing to complete.")
            return

        snapshot = self.state.begin_batch()
        if snapshot is not None:
            self.worker.start(snapshot, self.state.exclusion_set)
        self.update_status()

    def process_queue(self):
        """Apply events from the background thread."""
        events = self.worker.drain()
        for event in events:
            self.state.apply_event(event)
        if events:
            self.update_status()

        self.root.after(POLL_INTERVAL_MS, self.process_queue)

    # Results

    def on_text_modified(self, event=None):
        # The text area is editable; keep the state in sync with what the user sees
        if self.results_text.edit_modified():
            if not (self._updating_text or self.state.is_processing):
                self.state.recognized_text = self.results_text.get("1.0", "end-1c")
            self.results_text.edit_modified(False)
            self.update_buttons()

    def copy_results(self):
        if not self.state.can_copy:
            return
        if not copy_to_clipboard(self.state.recognized_text):
            messagebox.showerror("Copy Result",
                                 "Could not access the clipboard. On Linux, install xclip or xsel.")

    def save_results(self):
        """Save the current results to a file."""
        if not self.state.can_copy:
            messagebox.showwarning("Save Result", "No results to save.")
            return

        filename = filedialog.asksaveasfilename(
            title="Save Result",
            defaultextension=".txt",
            filetypes=[('Text files', '*.txt'), ('All files', '*.*')]
        )
        if not filename:
            return

        try:
            with open(filename, 'w', encoding='utf-8') as f:
                f.write(self.state.recognized_text)
            logger.info(f"Results saved to {filename}")
        except PermissionError:
            messagebox.showerror("Save Error", f"Permission denied saving to {filename}.\n\n"
                                               "Please check directory permissions and try a different location.")
        except OSError as e:
            messagebox.showerror("Save Error", f"OS error saving to {filename}: {e}")

    # Rendering

    def refresh(self):
        """Bring every widget in line with the application state."""
        self.render_thumbnails()
        self.update_status()

    def update_status(self):
        self.dictionary_label.config(text=self.state.dictionary_status)

        if self.state.is_processing:
            self.progress_bar.pack(fill=tk.X)
        else:
            self.progress_bar.pack_forget()
        self.progress_var.set(self.state.progress)

        text = self.state.recognized_text
        if self.results_text.get("1.0", "end-1c") != text:
            self._updating_text = True
            try:
                self.results_text.delete("1.0", tk.END)
                self.results_text.insert(tk.END, text)
                self.results_text.edit_modified(False)
            finally:
                self._updating_text = False

        self.update_buttons()

    def update_buttons(self):
        self.run_button.config(state=tk.NORMAL if self.state.can_run_ocr else tk.DISABLED)
        self.copy_button.config(state=tk.NORMAL if self.state.can_copy else tk.DISABLED)
        self.save_button.config(state=tk.NORMAL if self.state.can_copy else tk.DISABLED)

    def on_close(self):
        self.worker.cancel()
        self.root.destroy()


def main():
    """Main entry point for the GUI application."""
    config = Config()
    logging.basicConfig(level=config.log_level)

    if TKINTERDND_AVAILABLE:
        root = TkinterDnD.Tk()
    else:
        root = tk.Tk()

    app = OCRGUIApp(root, config)
    root.protocol("WM_DELETE_WINDOW", app.on_close)
    root.mainloop()


if __name__ == '__main__':
    main()
