"""Tkinter 图形界面实现。"""

from __future__ import annotations

import logging
import queue
import threading
import tkinter as tk
from pathlib import Path
from tkinter import colorchooser, filedialog, messagebox, ttk
from typing import Dict, List, Optional

from batch_watermark.core.config import (
    DEFAULT_WATERMARK_TEXT,
    VALID_POSITIONS,
    JobConfig,
    OutputConfig,
    WatermarkConfig,
    opacity_from_percent,
)
from batch_watermark.core.exceptions import NoEligibleFilesError, WatermarkToolError
from batch_watermark.core.models import BatchResult
from batch_watermark.core.progress import ProgressUpdate
from batch_watermark.core.scanner import SUPPORTED_EXTENSIONS
from batch_watermark.processing.pipeline import process_batch
from batch_watermark.utils.colors import parse_hex_color, to_hex_color
from batch_watermark.utils.logging import setup_logging

STATUS_TEXT = {
    "pending": "等待处理...",
    "processing": "处理中...",
    "success": "✓ 完成",
    "error": "✗ 失败",
}


class TextWidgetHandler(logging.Handler):
    """Logging handler that writes records into a Tk Text widget."""

    def __init__(self, widget: tk.Text) -> None:
        super().__init__()
        self._widget = widget

    def emit(self, record: logging.LogRecord) -> None:  # noqa: D401 - standard logging handler signature
        message = self.format(record)
        # Schedule UI update on main thread
        self._widget.after(0, self._write, message)

    def _write(self, message: str) -> None:
        if not self._widget.winfo_exists():
            return
        self._widget.configure(state=tk.NORMAL)
        self._widget.insert(tk.END, message + "\n")
        self._widget.configure(state=tk.DISABLED)
        self._widget.see(tk.END)


class WatermarkApp(tk.Tk):
    """Tkinter 主窗口。"""

    def __init__(self) -> None:
        super().__init__()
        self.title("批量水印工具")
        self.geometry("820x640")
        setup_logging()

        self.sources: List[Path] = []
        self._worker_thread: Optional[threading.Thread] = None
        self._event_queue: queue.Queue = queue.Queue()
        self._file_rows: Dict[str, str] = {}

        self._build_ui()
        self._attach_log_handler()
        self.after(200, self._poll_queue)

    # ---------------------- UI 构建 ---------------------- #

    def _build_ui(self) -> None:
        container = ttk.Frame(self, padding=12)
        container.pack(fill=tk.BOTH, expand=True)

        self._build_settings_section(container)
        self._build_source_section(container)
        self._build_progress_section(container)

    def _build_settings_section(self, parent: tk.Widget) -> None:
        frame = ttk.LabelFrame(parent, text="水印设置", padding=8)
        frame.pack(fill=tk.X, expand=False)

        ttk.Label(frame, text="水印文字:").grid(row=0, column=0, sticky=tk.W)
        self.text_var = tk.StringVar(value=DEFAULT_WATERMARK_TEXT)
        ttk.Entry(frame, textvariable=self.text_var, width=24).grid(row=0, column=1, sticky=tk.W, padx=4)

        ttk.Label(frame, text="颜色:").grid(row=0, column=2, sticky=tk.W)
        self.color_var = tk.StringVar(value="#ff0000")
        ttk.Entry(frame, textvariable=self.color_var, width=10).grid(row=0, column=3, sticky=tk.W, padx=4)
        ttk.Button(frame, text="选择...", command=self._pick_color).grid(row=0, column=4, sticky=tk.W)

        ttk.Label(frame, text="字体:").grid(row=3, column=0, sticky=tk.W, pady=4)
        self.font_var = tk.StringVar(value="")
        ttk.Entry(frame, textvariable=self.font_var, width=50).grid(
            row=3, column=1, columnspan=3, sticky=tk.EW, padx=4
        )
        ttk.Button(frame, text="选择字体...", command=self._pick_font).grid(row=3, column=4, sticky=tk.W)

        ttk.Label(frame, text="不透明度:").grid(row=1, column=0, sticky=tk.W, pady=4)
        self.opacity_var = tk.IntVar(value=30)
        self.opacity_label = ttk.Label(frame, text="30%")
        ttk.Scale(
            frame,
            from_=0,
            to=100,
            orient=tk.HORIZONTAL,
            command=self._on_opacity_change,
            variable=self.opacity_var,
        ).grid(row=1, column=1, sticky=tk.EW, padx=4)
        self.opacity_label.grid(row=1, column=2, sticky=tk.W)

        ttk.Label(frame, text="位置:").grid(row=1, column=3, sticky=tk.W)
        self.position_var = tk.StringVar(value="center")
        ttk.Combobox(
            frame, textvariable=self.position_var, values=VALID_POSITIONS, state="readonly", width=10
        ).grid(row=1, column=4, sticky=tk.W)

        ttk.Label(frame, text="输出目录:").grid(row=2, column=0, sticky=tk.W)
        self.output_var = tk.StringVar(value=str(Path.home()))
        ttk.Entry(frame, textvariable=self.output_var, width=50).grid(
            row=2, column=1, columnspan=3, sticky=tk.EW, padx=4
        )
        ttk.Button(frame, text="选择", command=self._select_output).grid(row=2, column=4, sticky=tk.W)

        frame.columnconfigure(1, weight=1)

    def _build_source_section(self, parent: tk.Widget) -> None:
        frame = ttk.LabelFrame(parent, text="选择文件", padding=8)
        frame.pack(fill=tk.X, pady=8)

        ttk.Button(frame, text="选择文件", command=self._select_files).pack(side=tk.LEFT)
        ttk.Button(frame, text="选择文件夹", command=self._select_folder).pack(side=tk.LEFT, padx=4)
        ttk.Label(frame, text="支持 PDF、DOCX、XLSX、PNG、JPG；DOCX/XLSX 仅原样复制").pack(side=tk.LEFT, padx=8)

    def _build_progress_section(self, parent: tk.Widget) -> None:
        frame = ttk.LabelFrame(parent, text="执行进度", padding=8)
        frame.pack(fill=tk.BOTH, expand=True)

        self.progress_var = tk.DoubleVar(value=0.0)
        ttk.Progressbar(frame, variable=self.progress_var, maximum=100).pack(fill=tk.X, padx=4, pady=4)
        self.progress_text = ttk.Label(frame, text="0 / 0")
        self.progress_text.pack(anchor=tk.W, padx=4)

        self.file_tree = ttk.Treeview(frame, columns=("status",), height=8)
        self.file_tree.heading("#0", text="文件")
        self.file_tree.heading("status", text="状态")
        self.file_tree.column("status", width=120, anchor=tk.CENTER)
        self.file_tree.pack(fill=tk.BOTH, expand=True, padx=4, pady=4)

        self.log_text = tk.Text(frame, height=6, state=tk.DISABLED)
        self.log_text.pack(fill=tk.BOTH, expand=False, padx=4)

    def _attach_log_handler(self) -> None:
        handler = TextWidgetHandler(self.log_text)
        handler.setLevel(logging.WARNING)
        handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        logging.getLogger("batch_watermark").addHandler(handler)

    # ---------------------- 事件处理 ---------------------- #

    def _on_opacity_change(self, value: str) -> None:
        self.opacity_label.configure(text=f"{int(float(value))}%")

    def _pick_color(self) -> None:
        rgb, _ = colorchooser.askcolor(color=self.color_var.get(), title="选择水印颜色")
        if rgb:
            self.color_var.set(to_hex_color(tuple(int(channel) for channel in rgb)))

    def _pick_font(self) -> None:
        filename = filedialog.askopenfilename(
            title="选择字体", filetypes=[("字体文件", "*.ttf *.ttc *.otf")]
        )
        if filename:
            self.font_var.set(filename)

    def _select_output(self) -> None:
        path = filedialog.askdirectory(title="选择输出目录", initialdir=self.output_var.get())
        if path:
            self.output_var.set(path)

    def _select_files(self) -> None:
        patterns = " ".join(f"*{ext}" for ext in SUPPORTED_EXTENSIONS)
        filenames = filedialog.askopenfilenames(title="选择文件", filetypes=[("支持的文件", patterns)])
        if filenames:
            self._start_processing([Path(name) for name in filenames])

    def _select_folder(self) -> None:
        path = filedialog.askdirectory(title="选择文件夹")
        if path:
            self._start_processing([Path(path)])

    def _start_processing(self, sources: List[Path]) -> None:
        if self._worker_thread and self._worker_thread.is_alive():
            messagebox.showinfo("提示", "任务正在执行中，请稍候。")
            return

        try:
            job = self._build_config(sources)
        except WatermarkToolError as exc:
            messagebox.showerror("配置错误", str(exc))
            return

        self.sources = list(sources)
        self.file_tree.delete(*self.file_tree.get_children())
        self._file_rows.clear()
        self.progress_var.set(0)
        self.progress_text.configure(text="0 / 0")

        self._worker_thread = threading.Thread(target=self._run_pipeline_thread, args=(job,), daemon=True)
        self._worker_thread.start()

    def _build_config(self, sources: List[Path]) -> JobConfig:
        font_value = self.font_var.get().strip()
        watermark = WatermarkConfig(
            text=self.text_var.get(),
            color=parse_hex_color(self.color_var.get()),
            opacity=opacity_from_percent(self.opacity_var.get()),
            position=self.position_var.get(),
            font_path=Path(font_value).expanduser() if font_value else None,
        )
        return JobConfig(
            sources=sources,
            output=OutputConfig(output_dir=Path(self.output_var.get()).expanduser()),
            watermark=watermark,
        )

    def _run_pipeline_thread(self, job: JobConfig) -> None:
        def progress_callback(update: ProgressUpdate) -> None:
            self._event_queue.put(("progress", update))

        try:
            result = process_batch(job, progress_callback=progress_callback)
            self._event_queue.put(("done", result))
        except NoEligibleFilesError as exc:
            self._event_queue.put(("empty", str(exc)))
        except Exception as exc:  # noqa: BLE001
            logging.getLogger(__name__).exception("批处理异常")
            self._event_queue.put(("error", str(exc)))

    def _poll_queue(self) -> None:
        try:
            while True:
                kind, payload = self._event_queue.get_nowait()
                if kind == "progress":
                    self._handle_progress(payload)
                elif kind == "done":
                    self._handle_done(payload)
                elif kind == "empty":
                    messagebox.showwarning("提示", payload)
                elif kind == "error":
                    messagebox.showerror("错误", payload)
        except queue.Empty:
            pass
        finally:
            self.after(200, self._poll_queue)

    def _handle_progress(self, update: ProgressUpdate) -> None:
        if update.name and update.status in STATUS_TEXT:
            row = self._file_rows.get(update.name)
            if row is None:
                row = self.file_tree.insert("", tk.END, text=update.name)
                self._file_rows[update.name] = row
            self.file_tree.set(row, "status", STATUS_TEXT[update.status])
        if update.total:
            self.progress_var.set(update.completed / update.total * 100)
            self.progress_text.configure(text=f"{update.completed} / {update.total}")

    def _handle_done(self, result: BatchResult) -> None:
        summary = f"成功处理 {len(result.succeeded)} 个文件，失败 {len(result.failed)} 个。"
        if result.archive_path:
            summary += f"\n压缩包保存在 {result.archive_path}。"
        messagebox.showinfo("完成", summary)


def run_gui() -> None:
    """启动 GUI 应用。"""

    app = WatermarkApp()
    app.mainloop()


if __name__ == "__main__":
    run_gui()
