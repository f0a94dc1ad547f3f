import json
import os
from dataclasses import replace

from rich.console import Console

from state import utc_timestamp
from utils.errors import ProjectNotFoundError, ProjectStorageError
from utils.project_codec import decode_projects, encode_projects

console = Console()

class ProjectManager:
    """Loads, saves, lists and deletes projects kept in a single JSON file.

    Every write goes to a temporary file that then replaces the real one,
    so a failed save leaves the previously stored projects intact.
    """
    def __init__(self, projects_file='projects.json'):
        self.projects_file = projects_file

    def _read_all(self):
        if not os.path.exists(self.projects_file):
            return []
        try:
            with open(self.projects_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ProjectStorageError(f"Failed to read projects from '{self.projects_file}': {e}") from e
        return decode_projects(data)

    def _write_all(self, projects):
        payload = encode_projects(projects)
        tmp_path = self.projects_file + '.tmp'
        try:
            directory = os.path.dirname(self.projects_file)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_path, self.projects_file)
        except OSError as e:
            try:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
            except OSError:
                console.log(f"[yellow]Could not remove temporary file '{tmp_path}'[/yellow]")
            raise ProjectStorageError(f"Failed to save projects to '{self.projects_file}': {e}") from e

    def list_projects(self):
        """Returns every stored project, in storage order."""
        return self._read_all()

    def load_project(self, project_id):
        """Returns the stored project with `project_id` or raises ProjectNotFoundError."""
        for project in self._read_all():
            if project.id == project_id:
                return project
        raise ProjectNotFoundError(project_id)

    def save_project(self, project, now=None):
        """
        Inserts or replaces the project with the same id.
        `last_modified` is refreshed before writing; the stored value is returned.
        """
        projects = self._read_all()
        stored = replace(project, last_modified=now or utc_timestamp())

        for i, existing in enumerate(projects):
            if existing.id == stored.id:
                projects[i] = stored
                break
        else:
            projects.append(stored)

        self._write_all(projects)
        console.log(f"Saved project '{stored.name}' ({stored.id}) to '{self.projects_file}'")
        return stored

    def delete_project(self, project_id):
        """Deletes a project. Unknown ids are a no-op and return False."""
        projects = self._read_all()
        remaining = [p for p in projects if p.id != project_id]
        if len(remaining) == len(projects):
            console.log(f"[yellow]Project '{project_id}' not found for deletion.[/yellow]")
            return False
        self._write_all(remaining)
        console.log(f"Deleted project '{project_id}'")
        return True
