# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import time
from typing import Callable, Optional

NANOS_PER_SECOND = 1_000_000_000


class Timer:
    """Wall-clock stopwatch over a monotonic nanosecond clock.

    Usable directly or as a context manager; leaving the ``with`` block
    freezes the elapsed time.
    """

    def __init__(self, nano_clock: Optional[Callable[[], int]] = None):
        """
        Create and start a Timer.

        :param nano_clock: Optional nanosecond clock function. Defaults to time.perf_counter_ns
        """
        self.nano_clock = nano_clock if nano_clock is not None else time.perf_counter_ns
        self.start_time = self.nano_clock()
        self.stop_time: Optional[int] = None

    def __enter__(self) -> "Timer":
        self.start_time = self.nano_clock()
        self.stop_time = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def stop(self) -> float:
        """
        Freeze the timer.

        :return: Elapsed time in seconds
        """
        if self.stop_time is None:
            self.stop_time = self.nano_clock()
        return self.elapsed_seconds()

    def elapsed_seconds(self) -> float:
        """
        Get elapsed time in seconds, up to now or up to stop().

        :return: Elapsed time in seconds
        """
        end = self.stop_time if self.stop_time is not None else self.nano_clock()
        return max(0, end - self.start_time) / float(NANOS_PER_SECOND)
