from .dashboard import *
from .operations import *
from .users import *
