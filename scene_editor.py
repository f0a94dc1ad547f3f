import argparse
import datetime
import os
import sys
from dataclasses import replace

import pygame
import pygame_gui
from pygame_gui.elements import UIButton, UILabel, UIPanel
from rich.panel import Panel
from rich.table import Table

from utils.actions import DeleteObject, TogglePlay, ToggleColliders, ToggleGrid, UpdateProject
from utils.canvas_controller import CanvasController
from utils.collision_utils import objects_at
from utils.config_manager import get_config
from utils.drawing_utils import create_frame, export_frame_png, render_scene
from utils.editor_session import EditorSession
from utils.errors import ProjectStorageError
from utils.font_utils import clear_font_cache
from utils.geometry_utils import screen_to_world
from utils.log_utils import AppLogger
from utils.project_manager import ProjectManager
from utils.scene_generators import TEMPLATE_NAMES


class SceneEditorApp:
    """Window hosting one editor session: a toolbar on top, the canvas below."""

    def __init__(self, session, config, logger):
        self.session = session
        self.config = config
        self.logger = logger

        self.w, self.h = config.display.window_width, config.display.window_height
        self.TOOLBAR_HEIGHT = config.display.toolbar_height
        self.screen = pygame.display.set_mode((self.w, self.h))
        pygame.display.set_caption("Scene Editor")
        self.clock = pygame.time.Clock()
        self.running = True

        self.canvas_rect = pygame.Rect(0, self.TOOLBAR_HEIGHT, self.w, self.h - self.TOOLBAR_HEIGHT)
        self.canvas_surface = create_frame(self.canvas_rect.width, self.canvas_rect.height)
        self.pointer_inside = False
        self.hover_text = ""

        self.ui_manager = pygame_gui.UIManager((self.w, self.h))
        self.setup_ui()

    def setup_ui(self):
        """Top toolbar: persistence and view toggles, plus a status label."""
        self.toolbar = UIPanel(pygame.Rect(0, 0, self.w, self.TOOLBAR_HEIGHT), manager=self.ui_manager)

        button_y = 4
        button_h = self.TOOLBAR_HEIGHT - 8
        x_pos = 8
        self.buttons = {}
        for key, text, width in (('save', 'Save', 70), ('grid', 'Grid', 70), ('colliders', 'Colliders', 90),
                                 ('snap', 'Snap', 70), ('play', 'Play', 70), ('export', 'Export PNG', 110)):
            self.buttons[key] = UIButton(pygame.Rect(x_pos, button_y, width, button_h), text, self.ui_manager, self.toolbar)
            x_pos += width + 6

        self.status_label = UILabel(pygame.Rect(x_pos + 10, button_y, self.w - x_pos - 30, button_h), "",
                                    self.ui_manager, self.toolbar)

    def run(self):
        """Main loop. The canvas is only re-rendered when the session state changed."""
        while self.running:
            time_delta = self.clock.tick(self.config.display.fps) / 1000.0

            self.handle_events()
            self.ui_manager.update(time_delta)

            if self.session.consume_dirty():
                self.redraw_canvas()
                self.update_status()

            self.screen.blit(self.canvas_surface, self.canvas_rect.topleft)
            self.ui_manager.draw_ui(self.screen)
            pygame.display.flip()

    def redraw_canvas(self):
        state = self.session.state
        scene = state.active_scene
        if scene is None:
            self.canvas_surface.fill(self.config.editor.clear_color)
            return
        render_scene(self.canvas_surface, scene, state.editor,
                     state.current_project.settings.grid_size, self.config.editor.clear_color)

    def update_status(self):
        state = self.session.state
        scene = state.active_scene
        parts = [f"Zoom: {round(state.editor.zoom * 100)}%"]
        if scene is not None:
            parts.append(f"Objects: {len(scene.objects)}")
        selected = self.session.selected_object()
        if selected is not None:
            parts.append(f"Selected: {selected.name}")
        if state.current_project is not None:
            parts.append(f"Snap: {'ON' if state.current_project.settings.snap_to_grid else 'OFF'}")
        if state.editor.is_playing:
            parts.append("PLAYING")
        if self.hover_text:
            parts.append(f"Under cursor: {self.hover_text}")
        if state.error:
            parts.append(f"! {state.error}")
        self.status_label.set_text(" | ".join(parts))

    def update_hover(self, canvas_pos):
        """Names every pickable object under the pointer, topmost first."""
        names = ""
        scene = self.session.active_scene()
        if canvas_pos is not None and scene is not None:
            view = self.session.state.editor
            world = screen_to_world(canvas_pos, view.zoom, (view.pan_x, view.pan_y))
            names = ", ".join(obj.name for obj in objects_at(world, scene.objects))
        if names != self.hover_text:
            self.hover_text = names
            self.update_status()

    def to_canvas(self, pos):
        return (pos[0] - self.canvas_rect.x, pos[1] - self.canvas_rect.y)

    def handle_events(self):
        """Process all pygame and pygame-gui events."""
        for event in pygame.event.get():
            handled_by_gui = self.ui_manager.process_events(event)

            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame_gui.UI_BUTTON_PRESSED:
                self.handle_button_press(event.ui_element)
            elif event.type == pygame.KEYDOWN:
                self.handle_key(event)
            elif not handled_by_gui:
                self.handle_canvas_event(event)

    def handle_canvas_event(self, event):
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.canvas_rect.collidepoint(event.pos):
                self.session.pointer_down(self.to_canvas(event.pos))
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.session.pointer_up(self.to_canvas(event.pos))
        elif event.type == pygame.MOUSEMOTION:
            inside = self.canvas_rect.collidepoint(event.pos)
            if self.pointer_inside and not inside:
                self.session.pointer_leave()
            elif inside:
                self.session.pointer_move(self.to_canvas(event.pos))
            self.pointer_inside = inside
            self.update_hover(self.to_canvas(event.pos) if inside else None)
        elif event.type == pygame.MOUSEWHEEL:
            self.session.wheel(event.y)

    def handle_key(self, event):
        step = self.config.editor.pan_step
        pans = {pygame.K_LEFT: (step, 0), pygame.K_RIGHT: (-step, 0),
                pygame.K_UP: (0, step), pygame.K_DOWN: (0, -step)}
        if event.key in pans:
            self.session.pan_by(*pans[event.key])
        elif event.key in (pygame.K_DELETE, pygame.K_BACKSPACE):
            self.delete_selected_object()
        elif event.key == pygame.K_s and event.mod & pygame.KMOD_CTRL:
            self.save_project()
        elif event.key == pygame.K_ESCAPE:
            self.running = False

    def handle_button_press(self, button):
        if button == self.buttons['save']:
            self.save_project()
        elif button == self.buttons['grid']:
            self.session.dispatch(ToggleGrid())
        elif button == self.buttons['colliders']:
            self.session.dispatch(ToggleColliders())
        elif button == self.buttons['snap']:
            self.toggle_snap()
        elif button == self.buttons['play']:
            self.session.dispatch(TogglePlay())
        elif button == self.buttons['export']:
            self.export_frame()

    def toggle_snap(self):
        project = self.session.state.current_project
        if project is None:
            return
        settings = project.settings
        self.session.dispatch(UpdateProject({
            'settings': replace(settings, snap_to_grid=not settings.snap_to_grid),
        }))

    def delete_selected_object(self):
        scene = self.session.active_scene()
        selected = self.session.selected_object()
        if scene is not None and selected is not None:
            self.session.dispatch(DeleteObject(scene.id, selected.id))
            self.logger.info(f"Deleted object '{selected.name}'")

    def save_project(self):
        try:
            self.session.save()
        except ProjectStorageError:
            # Already recorded in state.error and shown in the status bar.
            pass

    def export_frame(self):
        project = self.session.state.current_project
        name = project.id if project is not None else "scene"
        timestamp = datetime.datetime.now().strftime('%Y%m%d_%H%M%S')
        path = os.path.join(self.config.paths.export_dir, f"{timestamp}_{name}.png")
        export_frame_png(self.canvas_surface, path)
        self.logger.success(f"Exported frame to '{path}'")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="2D scene editor")
    source = parser.add_mutually_exclusive_group()
    source.add_argument('--template', help=f"Start a new project from a template ({', '.join(TEMPLATE_NAMES)})")
    source.add_argument('--project', help="Open a saved project by id")
    parser.add_argument('--config', default='config.yaml', help="Path to the YAML configuration")
    parser.add_argument('--projects-file', help="Override the projects JSON file")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    config = get_config(args.config)
    logger = AppLogger(config)

    projects_file = args.projects_file or config.paths.projects_file
    gateway = ProjectManager(projects_file)
    controller = CanvasController(config.editor.zoom_step)

    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_row("[cyan]Projects file[/]", projects_file)
    table.add_row("[cyan]Export directory[/]", config.paths.export_dir)
    logger.info(Panel(table, title="[bold magenta]Scene Editor[/bold magenta]", expand=False))

    if args.project:
        session = EditorSession(gateway, controller=controller, logger=logger)
        if not session.open_project(args.project):
            return 1
    else:
        session = EditorSession.from_template(args.template or config.editor.default_template, gateway,
                                              controller=controller, logger=logger)

    pygame.init()
    try:
        SceneEditorApp(session, config, logger).run()
    finally:
        pygame.quit()
        clear_font_cache()
    return 0


if __name__ == "__main__":
    sys.exit(main())
