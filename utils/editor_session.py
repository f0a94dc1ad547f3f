import threading
from collections import defaultdict

from state import GameState
from utils.actions import (
    DeleteProject,
    SetError,
    SetLoading,
    SetPan,
    SetProject,
    SetProjects,
)
from utils.canvas_controller import CanvasController
from utils.errors import ProjectNotFoundError, ProjectStorageError
from utils.reducer import apply_action
from utils.scene_generators import generate_project


class EditorSession:
    """One open editor: its GameState, its canvas controller and its storage.

    `dispatch` is the only way the state changes. The session raises a dirty
    flag whenever a dispatch produces a state that differs from the previous
    one, so the host only re-renders when something actually changed.
    Persistence is explicit: nothing is saved unless `save` is called.
    """

    def __init__(self, gateway, state=None, controller=None, logger=None):
        self.gateway = gateway
        self.state = state if state is not None else GameState()
        self.controller = controller or CanvasController()
        self.logger = logger
        self._dirty = True
        self._save_locks = defaultdict(threading.Lock)

    @classmethod
    def from_template(cls, template_name, gateway, rng=None, **kwargs):
        session = cls(gateway, **kwargs)
        project = generate_project(template_name, rng=rng)
        session.dispatch(SetProject(project))
        session._log("success", f"Created new {project.type} project '{project.name}'")
        return session

    def _log(self, level, message):
        if self.logger is not None:
            getattr(self.logger, level)(message)

    # --- State ------------------------------------------------------------

    def dispatch(self, action):
        new_state = apply_action(self.state, action)
        if new_state is not self.state and new_state != self.state:
            self._dirty = True
        self.state = new_state
        return new_state

    def dispatch_all(self, actions):
        for action in actions:
            self.dispatch(action)
        return self.state

    def consume_dirty(self):
        """Returns True once after every change, then False until the next one."""
        dirty = self._dirty
        self._dirty = False
        return dirty

    def active_scene(self):
        return self.state.active_scene

    def selected_object(self):
        scene = self.active_scene()
        if scene is None:
            return None
        return scene.find_object(self.state.editor.selected_object_id)

    # --- Canvas input -----------------------------------------------------

    def pointer_down(self, screen_pos):
        return self.dispatch_all(self.controller.pointer_down(self.state, screen_pos))

    def pointer_move(self, screen_pos):
        return self.dispatch_all(self.controller.pointer_move(self.state, screen_pos))

    def pointer_up(self, screen_pos=None):
        return self.dispatch_all(self.controller.pointer_up(self.state, screen_pos))

    def pointer_leave(self):
        return self.dispatch_all(self.controller.pointer_leave(self.state))

    def wheel(self, direction):
        return self.dispatch_all(self.controller.wheel(self.state, direction))

    def pan_by(self, dx, dy):
        view = self.state.editor
        return self.dispatch(SetPan(view.pan_x + dx, view.pan_y + dy))

    # --- Persistence ------------------------------------------------------

    def open_project(self, project_id):
        """
        Loads a stored project into the session.
        Unknown ids leave the current project untouched, set the error notice
        and return False.
        """
        self.dispatch(SetLoading(True))
        try:
            project = self.gateway.load_project(project_id)
        except ProjectNotFoundError as e:
            self.dispatch(SetError(str(e)))
            self._log("warning", str(e))
            return False
        except ProjectStorageError as e:
            self.dispatch(SetError(str(e)))
            self._log("error", str(e))
            raise
        finally:
            self.dispatch(SetLoading(False))

        self.dispatch(SetError(None))
        self.dispatch(SetProject(project))
        self._log("info", f"Opened project '{project.name}' ({project.id})")
        return True

    def save(self):
        """
        Writes the current project through the gateway.

        Saves of the same project id never overlap. A storage failure is
        recorded in `state.error` and re-raised to the caller.
        """
        project = self.state.current_project
        if project is None:
            return None

        with self._save_locks[project.id]:
            self.dispatch(SetLoading(True))
            try:
                stored = self.gateway.save_project(project)
            except ProjectStorageError as e:
                self.dispatch(SetError(str(e)))
                self._log("error", str(e))
                raise
            finally:
                self.dispatch(SetLoading(False))

        self.dispatch(SetError(None))
        # Keep the session in step with storage, unless it was edited meanwhile.
        if self.state.current_project == project:
            self.dispatch(SetProject(stored))
        self._log("success", f"Saved project '{stored.name}'")
        return stored

    def refresh_projects(self):
        """Reloads the saved-projects list from storage."""
        self.dispatch(SetLoading(True))
        try:
            projects = self.gateway.list_projects()
        except ProjectStorageError as e:
            self.dispatch(SetError(str(e)))
            self._log("error", str(e))
            raise
        finally:
            self.dispatch(SetLoading(False))
        self.dispatch(SetProjects(tuple(projects)))
        return self.state.projects

    def delete_project(self, project_id):
        """Deletes from storage and from the session; unknown ids are a no-op."""
        self.dispatch(SetLoading(True))
        try:
            deleted = self.gateway.delete_project(project_id)
        except ProjectStorageError as e:
            self.dispatch(SetError(str(e)))
            self._log("error", str(e))
            raise
        finally:
            self.dispatch(SetLoading(False))
        self.dispatch(DeleteProject(project_id))
        return deleted
