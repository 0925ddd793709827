"""
Example: Thumbnail creation with thumbkit

This example demonstrates how to:
- Create thumbnails for a folder with the facade
- Use the builder for files, numbered outputs and lazy iteration
"""
from pathlib import Path
from thumbkit import (
    ThumbnailProcessor,
    ProcessorConfig,
    ThumbnailBuilder,
    ConsecutivelyNumberedFilenames,
    ResamplingAlgorithm,
    SUFFIX_HYPHEN_THUMBNAIL,
    is_image,
)


def process_folder(folder: Path):
    """Create thumbnails for every image in a folder using the facade."""
    config = ProcessorConfig(
        default_rename=SUFFIX_HYPHEN_THUMBNAIL,
        algorithm=ResamplingAlgorithm.BICUBIC,
        allow_overwrite=False,
    )

    processor = ThumbnailProcessor(config)

    images = sorted(p for p in folder.iterdir() if is_image(p))
    written = processor.create_thumbnails(images, width=320, height=240)
    print(f"Created {len(written)} thumbnails")
    return written


def use_builder(folder: Path):
    """Use the builder directly for specific tasks."""
    out_dir = folder / "thumbs"
    out_dir.mkdir(exist_ok=True)

    builder = ThumbnailBuilder.from_directory(folder).width(200).output_format("png")
    names = ConsecutivelyNumberedFilenames(out_dir, "thumb-%03d.png", start=1)
    written = builder.as_files(names)
    print(f"Numbered thumbnails: {[p.name for p in written]}")

    for thumb in ThumbnailBuilder.from_directory(folder).scale(0.1).iterable_images():
        print(f"Thumbnail: {thumb.width}x{thumb.height}")


if __name__ == "__main__":
    import sys

    if len(sys.argv) < 2:
        print("Usage: python thumbnail_usage.py <folder_path>")
        sys.exit(1)

    folder = Path(sys.argv[1])
    if not folder.exists():
        print(f"Folder not found: {folder}")
        sys.exit(1)

    process_folder(folder)
    use_builder(folder)
