#!/usr/bin/env python3
"""
pngtostl Web Interface

A simple Gradio-based web UI for converting images to 3D-printable STL reliefs.

Run with: python app.py
Then open http://localhost:7860 in your browser
"""

import sys
from pathlib import Path
import tempfile
import numpy as np

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

import gradio as gr
from pngtostl import ReliefGenerator, HeightFieldConfig, PngToStlError


def process_image(
    image,
    levels: int,
    relief_height: float,
    base_height: float,
    polarity: str,
    binary: bool
):
    """
    Convert an uploaded image into an STL relief.

    Returns preview path, stats text, and the STL path for download.
    """
    if image is None:
        return None, "Please upload an image first.", None

    if not isinstance(image, np.ndarray) or image.ndim not in (2, 3):
        return None, "Invalid image format.", None

    if image.ndim == 2:
        # Grayscale - replicate into RGB
        image = np.stack([image, image, image], axis=-1)

    try:
        config = HeightFieldConfig(
            levels=int(levels),
            relief_height=float(relief_height),
            base_height=float(base_height),
            negative=(polarity == "Negative")
        )
        generator = ReliefGenerator(config)
        generator.load_array(image.astype(np.uint8))
    except (PngToStlError, ValueError) as e:
        return None, f"Error: {e}", None

    stats = generator.get_mesh_stats()
    width, height = stats["image_size"]

    stats_text = f"""## Conversion Complete!

| Metric | Value |
|--------|-------|
| Input Size | {width} x {height} pixels |
| Triangles | {stats['triangle_count']:,} |
| Max Luminance | {stats['max_luminance']:.1f} |
| Levels Used | {stats['levels_used']} of {stats['levels']} |
| Height Range | {stats['min_height']:.3f} - {stats['max_height']:.3f} mm |
| Footprint | {width} x {height} mm |

**Settings:** {polarity}, Levels={config.levels}, Relief={config.relief_height} mm, Base={config.base_height} mm
"""

    export_dir = tempfile.mkdtemp(prefix="pngtostl_")

    # Model3D previews ASCII STL; the download honors the binary option
    preview_path = str(Path(export_dir) / "preview.stl")
    generator.export_stl(preview_path)

    stl_path = preview_path
    if binary:
        stl_path = str(Path(export_dir) / "relief.stl")
        generator.export_stl(stl_path, binary=True)

    return preview_path, stats_text, stl_path


def create_demo_image(style: str):
    """Create a demo image for testing."""
    if not style:
        return None

    size = 64
    rgb = np.zeros((size, size, 3), dtype=np.uint8)

    if style == "Gradient":
        ramp = np.linspace(0, 255, size).astype(np.uint8)
        rgb[:, :] = ramp[np.newaxis, :, np.newaxis]

    elif style == "Circle":
        center = size // 2
        radius = size // 2 - 4
        for y in range(size):
            for x in range(size):
                dist = np.sqrt((x - center)**2 + (y - center)**2)
                if dist < radius:
                    value = int((1 - dist / radius) * 255)
                    rgb[y, x] = [value, value, value]

    elif style == "Rings":
        center = size // 2
        for y in range(size):
            for x in range(size):
                dist = np.sqrt((x - center)**2 + (y - center)**2)
                value = int((np.sin(dist / 2.0) + 1) * 127.5)
                rgb[y, x] = [value, value, value]

    elif style == "Checker":
        for y in range(size):
            for x in range(size):
                if (x // 8 + y // 8) % 2 == 0:
                    rgb[y, x] = [240, 240, 240]

    return rgb


# Build the Gradio interface
with gr.Blocks(title="PNG to STL") as app:

    gr.Markdown("""
    # PNG to STL
    ### Turn images into 3D-printable reliefs

    Upload an image or try a demo, adjust the settings, and download your STL!
    """)

    with gr.Row():
        # Left column - Input
        with gr.Column(scale=1):
            gr.Markdown("### Input Image")

            image_input = gr.Image(
                label="Upload Image",
                type="numpy",
                image_mode="RGB"
            )

            with gr.Row():
                demo_dropdown = gr.Dropdown(
                    choices=["Gradient", "Circle", "Rings", "Checker"],
                    label="Or try a demo"
                )
                demo_btn = gr.Button("Load Demo")

            gr.Markdown("### Settings")

            levels = gr.Slider(
                minimum=2,
                maximum=64,
                value=20,
                step=1,
                label="Levels (heights/greys)"
            )

            relief_height = gr.Slider(
                minimum=0.1,
                maximum=10.0,
                value=1.0,
                step=0.1,
                label="Relief Height (mm)"
            )

            base_height = gr.Slider(
                minimum=0.0,
                maximum=5.0,
                value=0.2,
                step=0.1,
                label="Base Height (mm)"
            )

            polarity = gr.Radio(
                choices=["Negative", "Positive"],
                value="Negative",
                label="Polarity"
            )

            binary = gr.Checkbox(value=False, label="Binary STL download")

            generate_btn = gr.Button("Generate STL", variant="primary")

        # Middle column - 3D Preview
        with gr.Column(scale=2):
            gr.Markdown("### 3D Preview")
            gr.Markdown("*Click and drag to rotate, scroll to zoom*")

            model_preview = gr.Model3D(
                label="3D Model Preview",
                clear_color=[0.1, 0.1, 0.1, 1.0]
            )

            stats_output = gr.Markdown(
                value="Upload an image and click 'Generate' to see results."
            )

        # Right column - Downloads
        with gr.Column(scale=1):
            gr.Markdown("### Download")

            stl_output = gr.File(label="STL")

            gr.Markdown("""
            ---
            **Tips:**
            - **Negative** = dark pixels are thicker (lithophanes)
            - **Positive** = bright pixels are thicker
            - Every pixel is 1 x 1 mm
            - Large images make very large STL files
            """)

    # Wire up events
    demo_btn.click(
        fn=create_demo_image,
        inputs=[demo_dropdown],
        outputs=[image_input]
    )

    generate_btn.click(
        fn=process_image,
        inputs=[
            image_input,
            levels,
            relief_height,
            base_height,
            polarity,
            binary
        ],
        outputs=[model_preview, stats_output, stl_output]
    )


if __name__ == "__main__":
    print("\n" + "="*60)
    print("PNG to STL Web Interface")
    print("="*60)
    print("\nStarting server...")
    print("Open http://localhost:7860 in your browser\n")

    app.launch(
        server_name="0.0.0.0",
        server_port=7860,
        share=False
    )
