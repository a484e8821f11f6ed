# proposal/__init__.py
#
# Copyright (C) 2009-2014  Red Hat, Inc.
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

from .names import available_name, name_taken
from .space_reclaimer import SpaceReclaimer
from .vg_builder import VolumeGroupBuilder
from .distribution import DistributionCalculator, PartitionsDistribution
from .partition_creator import PartitionCreator, CreatorResult
from .space_maker import SpaceMaker
from .devices_planner import DevicesPlanner
from .orchestrator import AllocationOutcome, DistributionOrchestrator
