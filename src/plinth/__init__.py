"""plinth - schema archive packaging and a CRUD view facade for plugin-based web apps."""

from . import steps as steps
from .builder import SchemaArchiveBuilder as SchemaArchiveBuilder
from .builder import SchemaBuild as SchemaBuild
from .builder import build_schema_archive as build_schema_archive
from .context import BuildContext as BuildContext
from .crud import CrudService as CrudService
from .crud import DefaultCrudService as DefaultCrudService
from .engine import ViewRegistry as ViewRegistry
from .errors import BuildError as BuildError
from .errors import InvalidEventError as InvalidEventError
from .errors import PlinthError as PlinthError
from .errors import TemplateNotFoundError as TemplateNotFoundError
from .errors import ViewNotFoundError as ViewNotFoundError
from .goals import Goal as Goal
from .phases import Always as Always
from .phases import Clean as Clean
from .phases import Ensure as Ensure
from .phases import Phase as Phase
from .projects import Project as Project
from .response import ResponseModel as ResponseModel
from .response import ViewRenderer as ViewRenderer
from .step import Step as Step
from .step import step as step
from .workspace import Workspace as Workspace
