from typing import TYPE_CHECKING, Dict, List

from tinypress.utils.format import format_dimensions, format_size


if TYPE_CHECKING:
    from tinypress.core.image_compressor import CompressionResult


# ============================================================================
# Summary Message
# ============================================================================


def format_summary(result: "CompressionResult") -> str:
    """
    Build the message shown after a successful compression.

    Example::

        Filesize reduced by 50.0%:
        example.png (19.53 KB) => example_tiny.png (9.77 KB)
        12 Tinify API calls this month
    """
    lines = [
        f"Filesize reduced by {result.percent_reduced}%:",
        f"{result.source_path.name} ({format_size(result.original_size)}) => "
        f"{result.output_path.name} ({format_size(result.compressed_size)})",
    ]
    if result.resized:
        lines.append(
            f"Image dimensions resized from {format_dimensions(result.original_dimensions)} "
            f"to {format_dimensions(result.output_dimensions)}"
        )
    if result.compression_count is not None:
        lines.append(f"{result.compression_count} Tinify API calls this month")
    return "\n".join(lines)


# ============================================================================
# Statistics Tracker
# ============================================================================


class StatisticsTracker:
    """Accumulates totals across a batch of compressions."""

    def __init__(self):
        self.stats: Dict = {
            "total_files": 0,
            "processed": 0,
            "errors": 0,
            "total_original_size": 0,
            "total_compressed_size": 0,
            "space_saved": 0,
            "compression_count": None,
            "files": [],
        }

    def add_result(self, result: "CompressionResult") -> None:
        """Record a successful compression."""
        self.stats["total_files"] += 1
        self.stats["processed"] += 1
        self.stats["total_original_size"] += result.original_size
        self.stats["total_compressed_size"] += result.compressed_size
        self.stats["space_saved"] += result.space_saved
        if result.compression_count is not None:
            self.stats["compression_count"] = result.compression_count
        self.stats["files"].append(
            {
                "name": result.source_path.name,
                "output": str(result.output_path),
                "original_size": result.original_size,
                "compressed_size": result.compressed_size,
                "space_saved": result.space_saved,
                "percent_reduced": result.percent_reduced,
                "status": "success",
            }
        )

    def add_error(self, name: str, error: Exception) -> None:
        """Record a failed compression."""
        self.stats["total_files"] += 1
        self.stats["errors"] += 1
        self.stats["files"].append({"name": name, "status": "error", "error": str(error)})

    def get_stats(self) -> Dict:
        return self.stats

    def summary_lines(self) -> List[str]:
        original = self.stats["total_original_size"]
        saved = self.stats["space_saved"]
        percent = round(saved / original * 100, 1) if original else 0.0
        lines = [
            f"Processed: {self.stats['processed']} files",
            f"Errors: {self.stats['errors']}",
            f"Space saved: {format_size(saved)} ({percent}%)",
        ]
        if self.stats["compression_count"] is not None:
            lines.append(f"Tinify API calls this month: {self.stats['compression_count']}")
        return lines
