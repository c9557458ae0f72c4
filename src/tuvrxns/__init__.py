"""The tuvrxns python module keeps the reaction numbering of TUV consistent across files.
`setrxns` contains the main run wrapper that rewrites all files from a configuration.
`catalog` and `registry` recover the ordered TUV reaction list from the TUV sources.
`flags` sets the reaction flags of the TUV input files.
`emitters` rewrites the TUV input files, the DSMACC include files and the wiki tables.
"""

from .config import SetrxnsConfig as SetrxnsConfig
from .flags import FlagPolicy as FlagPolicy
from .flags import compute_flags as compute_flags
from .registry import ReactionRegistry as ReactionRegistry
from .report import SetrxnsReport as SetrxnsReport
from .setrxns import get_registry as get_registry
from .setrxns import run_setrxns as run_setrxns
