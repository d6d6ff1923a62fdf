"""Wayland protocol code generator."""

from .parser import *
from .properties import synthesize as synthesize
from .tables import InterfacePlan as InterfacePlan
from .tables import MessagePlan as MessagePlan
from .tables import TablePlanner as TablePlanner
from .tables import TypeTable as TypeTable
from .tables import plan_tables as plan_tables
from .tables import signature as signature
from .types import *
