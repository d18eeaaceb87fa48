from sacristy.db.models.blog_post import BlogPost
from sacristy.db.models.celebration import Celebration
from sacristy.db.models.donation import Donation
from sacristy.db.models.parish import Parish
from sacristy.db.models.pastoral import Pastoral
from sacristy.db.models.photo import Photo
from sacristy.db.models.photo_album import PhotoAlbum
from sacristy.db.models.priest import Priest
from sacristy.db.models.schedule import Schedule
from sacristy.db.models.setting import Setting
from sacristy.db.models.slide import Slide
from sacristy.db.models.timeline_event import TimelineEvent
from sacristy.db.models.urgent_popup import UrgentPopup

__all__ = ["BlogPost", "Celebration", "Donation", "Parish", "Pastoral", "Photo", "PhotoAlbum", "Priest", "Schedule", "Setting", "Slide", "TimelineEvent", "UrgentPopup"]
