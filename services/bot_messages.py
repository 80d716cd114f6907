"""Text helpers for every reply the bot sends."""

from __future__ import annotations

from models.compression import CompressionResult
from utils.media_validation import MAX_QUALITY, MIN_QUALITY, format_kilobytes


def welcome_text() -> str:
	return "👋 Welcome! What would you like to do?"


def quality_prompt_text() -> str:
	return f"⚙️ Send desired JPEG quality ({MIN_QUALITY}–{MAX_QUALITY}):"


def invalid_quality_text() -> str:
	return f"❗ Invalid quality. Enter a number between {MIN_QUALITY} and {MAX_QUALITY}."


def quality_set_text(quality: int) -> str:
	return f"👍 Quality set to {quality}%. Now send me any number of images (photo or file)."


def not_ready_text() -> str:
	return "❗ Tap “Compress Images” and set quality first."


def unsupported_payload_text() -> str:
	return "❗ Please send a photo or an image file."


def transform_failed_text() -> str:
	return "❗ Oops—could not process your image."


def use_start_text() -> str:
	return "⚙️ Use /start to begin."


def compression_caption(result: CompressionResult, count: int) -> str:
	"""Return the caption attached to a compressed image."""
	return (
		f"✅ Compressed ({result.quality}% quality)\n"
		f"• Original: {format_kilobytes(result.original_size)} KB\n"
		f"• Compressed: {format_kilobytes(result.compressed_size)} KB\n"
		f"• Reduction: {result.reduction_percent}%\n"
		f"Images processed: {count}"
	)


def done_summary_text(total: int) -> str:
	"""Return the batch summary, pluralising `image` unless exactly one."""
	noun = "image" if total == 1 else "images"
	return f"🎉 Done! You processed {total} {noun}.\nTap below to start again."
