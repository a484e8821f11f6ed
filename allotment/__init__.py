# __init__.py
#
# Copyright (C) 2009, 2010, 2011, 2012, 2013  Red Hat, Inc.
#
# This copyrighted material is made available to anyone wishing to use,
# modify, copy, or redistribute it subject to the terms and conditions of
# the GNU General Public License v.2, or (at your option) any later version.
# This program is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY expressed or implied, including the implied warranties of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General
# Public License for more details.  You should have received a copy of the
# GNU General Public License along with this program; if not, write to the
# Free Software Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA
# 02110-1301, USA.  Any Red Hat trademarks that are incorporated in the
# source code or documentation are not subject to the GNU General Public
# License and may only be used or replicated with the express permission of
# Red Hat, Inc.
#

__version__ = '0.1.0'

import warnings

import logging
log = logging.getLogger("allotment")

# Tell the warnings module not to ignore DeprecationWarning, which it does by
# default.
warnings.simplefilter('module', DeprecationWarning)

from .size import Size, UNLIMITED
from .devicegraph import Devicegraph
from .diskanalyzer import DiskAnalyzer
from .settings import ProposalSettings
from .proposal import AllocationOutcome, DistributionOrchestrator
