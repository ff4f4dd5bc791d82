from collections.abc import Callable
from tableview.util.bulkheads import capture_crashes_to_stderr
from tableview.util.wx_bind import bind
from tableview.util.xthreading import fg_affinity
import wx


class Timer(wx.EvtHandler):
    """
    Runs an action on the foreground thread every X milliseconds.
    
    Used to poll a watched data file for changes.
    """
    
    @fg_affinity  # wx.Timer must be manipulated on foreground thread
    def __init__(self, 
            action: Callable[[], None],
            period: int,
            ) -> None:
        """
        Starts a timer that calls the specified action repeatedly
        at the specified period (in milliseconds).
        
        Raises:
        * TimerError -- if timer could not be started
        """
        super().__init__()
        self._timer = wx.Timer(self)
        self._action = action
        
        bind(self, wx.EVT_TIMER, self._notify)
        
        if not self._timer.Start(period):
            raise TimerError('Failed to start timer')
    
    # === Operations ===
    
    @fg_affinity
    def stop(self) -> None:
        self._timer.Stop()
    
    # === Internal ===
    
    @capture_crashes_to_stderr
    @fg_affinity
    def _notify(self, event: wx.TimerEvent) -> None:
        self._action()


class TimerError(Exception):
    pass
