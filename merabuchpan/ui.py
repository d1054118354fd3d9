"""Flet user interface for MeraBuchpan.

The window shows one of four views depending on the controller's AppState:
the two upload areas with the generate button, a loading indicator, the
generated image with download and start-over actions, or an error banner.

Typical usage:
    import flet as ft
    from merabuchpan.ui import main
    ft.app(target=main)
"""

import logging
import threading
from typing import Callable, Optional

import flet as ft

from merabuchpan.config import Settings, get_settings
from merabuchpan.controller import AppState, ReunionController
from merabuchpan.generation import GeneratedImage, ReunionImageGenerator
from merabuchpan.photos import (
    ALLOWED_EXTENSIONS,
    ImageSaver,
    SelectedPhoto,
    download_file_name,
    encode_payload,
    extension_for,
    load_photo,
)

logger = logging.getLogger(__name__)

APP_TITLE: str = "MeraBuchpan"
APP_TAGLINE: str = (
    "Reunite with your inner child. Upload two photos to create a timeless moment "
    "of you hugging your younger self."
)


class UIUpdater:
    """Manage UI updates and page refreshes in a centralized way.

    All methods call page.update() after making changes, so callers don't
    need to trigger refreshes themselves.

    Attributes:
        page: The Flet Page instance to update.
    """

    def __init__(self, page: ft.Page) -> None:
        self.page: ft.Page = page

    def update_status(self, message: str, status_component: ft.Text) -> None:
        status_component.value = message
        self.page.update()

    def update_image_display(
        self, image_base64: str, image_container: ft.Container
    ) -> None:
        """Show a base64 image inside a container, replacing its content.

        Uses CONTAIN fit so the preview keeps its aspect ratio.
        """
        image_container.content = ft.Image(
            src_base64=image_base64,
            fit=ft.ImageFit.CONTAIN,
            expand=True,
        )
        self.page.update()

    def show_content(self, content: ft.Control, area: ft.Container) -> None:
        area.content = content
        self.page.update()


class ImageUploader:
    """Upload area with a label, a file picker and a local preview.

    Clicking the area opens the native file picker. A chosen file is loaded
    into a SelectedPhoto, handed to ``on_file_select`` and previewed. A
    cancelled dialog changes nothing.

    Attributes:
        label: Heading shown above the area.
        control: The Flet control to place on the page.
    """

    def __init__(
        self,
        label: str,
        on_file_select: Callable[[SelectedPhoto], None],
        ui_updater: UIUpdater,
    ) -> None:
        self.label: str = label
        self.on_file_select = on_file_select
        self.ui_updater: UIUpdater = ui_updater

        self.picker = ft.FilePicker(on_result=self._on_pick_result)
        ui_updater.page.overlay.append(self.picker)

        self.preview_container = ft.Container(
            content=self._placeholder(),
            width=320,
            height=320,
            alignment=ft.alignment.center,
            bgcolor=ft.Colors.WHITE,
            border=ft.border.all(2, ft.Colors.GREY_300),
            border_radius=16,
            clip_behavior=ft.ClipBehavior.HARD_EDGE,
            on_click=self._open_picker,
            ink=True,
        )
        self.control = ft.Column(
            [
                ft.Text(label, size=20, weight=ft.FontWeight.W_600, color=ft.Colors.GREY_800),
                self.preview_container,
            ],
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            spacing=12,
        )

    @staticmethod
    def _placeholder() -> ft.Control:
        return ft.Column(
            [
                ft.Icon(ft.Icons.UPLOAD_FILE, size=40, color=ft.Colors.GREY_500),
                ft.Text("Click to upload", weight=ft.FontWeight.W_500, color=ft.Colors.GREY_600),
                ft.Text("PNG, JPG, or WEBP", size=12, color=ft.Colors.GREY_500),
            ],
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            alignment=ft.MainAxisAlignment.CENTER,
        )

    def _open_picker(self, _: ft.ControlEvent) -> None:
        self.picker.pick_files(
            dialog_title=self.label,
            file_type=ft.FilePickerFileType.CUSTOM,
            allowed_extensions=list(ALLOWED_EXTENSIONS),
            allow_multiple=False,
        )

    def _on_pick_result(self, e: ft.FilePickerResultEvent) -> None:
        if not e.files:
            return

        picked = e.files[0]
        if not picked.path:
            logger.warning("Picked file %s has no local path, ignoring", picked.name)
            return

        try:
            photo = load_photo(picked.path)
        except OSError as err:
            logger.warning("Could not read %s: %s", picked.path, err)
            return

        self.on_file_select(photo)
        self.ui_updater.update_image_display(encode_payload(photo.data), self.preview_container)

    def clear(self) -> None:
        """Drop the preview and show the upload prompt again."""
        self.preview_container.content = self._placeholder()


class ResultDownloader:
    """Save dialog for the generated image.

    The suggested filename takes its extension from the image's MIME type,
    and the bytes are written unchanged to the chosen path.

    Attributes:
        status_component: Text control that reports the outcome.
        get_image: Returns the image to save, or None.
        file_name: Base filename offered in the dialog.
    """

    def __init__(
        self,
        ui_updater: UIUpdater,
        status_component: ft.Text,
        get_image: Callable[[], Optional[GeneratedImage]],
        file_name: str,
    ) -> None:
        self.ui_updater: UIUpdater = ui_updater
        self.status_component: ft.Text = status_component
        self.get_image = get_image
        self.file_name: str = file_name

        self.picker = ft.FilePicker(on_result=self._on_save_result)
        ui_updater.page.overlay.append(self.picker)

    def open_dialog(self) -> None:
        image = self.get_image()
        if image is None:
            return
        extension = extension_for(image.mime_type)
        self.picker.save_file(
            dialog_title="Download",
            file_name=download_file_name(self.file_name, image.mime_type),
            file_type=ft.FilePickerFileType.CUSTOM,
            allowed_extensions=[extension],
        )

    def _on_save_result(self, e: ft.FilePickerResultEvent) -> None:
        image = self.get_image()
        if not e.path or image is None:
            return
        try:
            filename = ImageSaver.save_image(image.data, e.path)
        except OSError as err:
            logger.error("Saving image to %s failed: %s", e.path, err)
            self.ui_updater.update_status(f"Could not save image: {err}", self.status_component)
            return
        logger.info("Saved generated image to %s", filename)
        self.ui_updater.update_status(f"Image saved as {filename}", self.status_component)


def main(page: ft.Page, generator: Optional[ReunionImageGenerator] = None) -> None:
    """Main Flet application entry point.

    Builds the upload view, wires the controller to the page and renders the
    view matching the current state on every transition.

    Args:
        page: Flet page object for UI rendering.
        generator: Generation client to use. Built from settings when omitted.
    """
    settings: Settings = get_settings()
    if generator is None:
        generator = ReunionImageGenerator.from_settings(settings)

    page.title = APP_TITLE
    page.theme_mode = ft.ThemeMode.LIGHT
    page.bgcolor = ft.Colors.INDIGO_50
    page.window.width = 1000
    page.window.height = 900
    page.horizontal_alignment = ft.CrossAxisAlignment.CENTER
    page.scroll = ft.ScrollMode.AUTO

    ui_updater = UIUpdater(page)
    content_area = ft.Container(alignment=ft.alignment.center)
    status_text = ft.Text("", size=14, color=ft.Colors.GREY_700)

    generate_btn = ft.ElevatedButton(
        "Create Magic",
        icon=ft.Icons.AUTO_AWESOME,
        disabled=True,
        bgcolor=ft.Colors.INDIGO_600,
        color=ft.Colors.WHITE,
        height=56,
    )

    def refresh_generate_button() -> None:
        generate_btn.disabled = not controller.can_generate
        page.update()

    def on_child_selected(photo: SelectedPhoto) -> None:
        controller.select_child_photo(photo)
        refresh_generate_button()

    def on_adult_selected(photo: SelectedPhoto) -> None:
        controller.select_adult_photo(photo)
        refresh_generate_button()

    child_uploader = ImageUploader("Your Childhood Photo", on_child_selected, ui_updater)
    adult_uploader = ImageUploader("Your Recent Photo", on_adult_selected, ui_updater)

    downloader = ResultDownloader(
        ui_updater,
        status_text,
        get_image=lambda: controller.generated_image,
        file_name=settings.download_filename,
    )

    def on_download_click(_: ft.ControlEvent) -> None:
        downloader.open_dialog()

    def on_reset_click(_: ft.ControlEvent) -> None:
        child_uploader.clear()
        adult_uploader.clear()
        status_text.value = ""
        controller.reset()

    def generate_image_thread() -> None:
        """Background thread so the loading view keeps painting during the call."""
        controller.generate()

    def on_generate_click(_: ft.ControlEvent) -> None:
        generate_btn.disabled = True
        page.update()
        threading.Thread(target=generate_image_thread, daemon=True).start()

    generate_btn.on_click = on_generate_click

    def build_initial_view() -> ft.Control:
        generate_btn.disabled = not controller.can_generate
        return ft.Column(
            [
                ft.ResponsiveRow(
                    [
                        ft.Container(child_uploader.control, col={"md": 6}),
                        ft.Container(adult_uploader.control, col={"md": 6}),
                    ],
                    spacing=32,
                    run_spacing=32,
                ),
                generate_btn,
            ],
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            spacing=32,
        )

    def build_loading_view() -> ft.Control:
        return ft.Container(
            content=ft.Column(
                [
                    ft.ProgressRing(width=64, height=64, color=ft.Colors.INDIGO_400),
                    ft.Text("Creating your moment...", size=24, weight=ft.FontWeight.W_600),
                    ft.Text(
                        "This magical process can take a minute. Please wait.",
                        color=ft.Colors.GREY_600,
                    ),
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                spacing=16,
            ),
            padding=32,
            bgcolor=ft.Colors.WHITE70,
            border_radius=12,
        )

    def build_result_view() -> ft.Control:
        image = controller.generated_image
        controls = [ft.Text("Your Memory, Reimagined", size=30, weight=ft.FontWeight.BOLD)]
        if image is not None:
            controls.append(
                ft.Container(
                    content=ft.Image(src_base64=encode_payload(image.data), fit=ft.ImageFit.CONTAIN),
                    width=640,
                    border=ft.border.all(4, ft.Colors.WHITE),
                    border_radius=8,
                    clip_behavior=ft.ClipBehavior.HARD_EDGE,
                )
            )
        controls.append(
            ft.Row(
                [
                    ft.ElevatedButton(
                        "Download",
                        icon=ft.Icons.DOWNLOAD,
                        on_click=on_download_click,
                        bgcolor=ft.Colors.GREEN_500,
                        color=ft.Colors.WHITE,
                    ),
                    ft.ElevatedButton(
                        "Start Over",
                        icon=ft.Icons.REFRESH,
                        on_click=on_reset_click,
                        bgcolor=ft.Colors.GREY_600,
                        color=ft.Colors.WHITE,
                    ),
                ],
                alignment=ft.MainAxisAlignment.CENTER,
                spacing=16,
            )
        )
        controls.append(status_text)
        return ft.Column(controls, horizontal_alignment=ft.CrossAxisAlignment.CENTER, spacing=20)

    def build_error_view() -> ft.Control:
        return ft.Container(
            content=ft.Column(
                [
                    ft.Text(
                        spans=[
                            ft.TextSpan("Oops! ", ft.TextStyle(weight=ft.FontWeight.BOLD)),
                            ft.TextSpan(controller.error or ""),
                        ],
                        color=ft.Colors.RED_700,
                    ),
                    ft.ElevatedButton(
                        "Try Again",
                        icon=ft.Icons.REFRESH,
                        on_click=on_reset_click,
                        bgcolor=ft.Colors.RED_500,
                        color=ft.Colors.WHITE,
                    ),
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                spacing=16,
            ),
            width=520,
            padding=16,
            bgcolor=ft.Colors.RED_100,
            border=ft.border.all(1, ft.Colors.RED_400),
            border_radius=8,
        )

    views = {
        AppState.INITIAL: build_initial_view,
        AppState.LOADING: build_loading_view,
        AppState.RESULT: build_result_view,
        AppState.ERROR: build_error_view,
    }

    def render(state: AppState) -> None:
        ui_updater.show_content(views[state](), content_area)

    controller = ReunionController(generator, on_change=render)

    page.add(
        ft.Column(
            [
                ft.Text(APP_TITLE, size=56, weight=ft.FontWeight.W_800, color=ft.Colors.INDIGO_500),
                ft.Text(APP_TAGLINE, size=18, color=ft.Colors.GREY_600, text_align=ft.TextAlign.CENTER),
                content_area,
            ],
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            spacing=24,
        )
    )
    render(controller.state)
