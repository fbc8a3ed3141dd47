"""Centralized constants for pharma-pitch."""
#Durable storage keys (one serialized array per collection)
BRANDS_KEY="pharma_brands"
DOCTORS_KEY="pharma_doctors"
#Doctor defaults
DEFAULT_HOSPITAL="General Hospital"
#Content-analysis fallback
FALLBACK_BRAND_NAME="Unknown Brand"
FALLBACK_DESCRIPTION="No description available."
#Upload
ALLOWED_IMAGE_EXTS={".png",".jpg",".jpeg",".gif",".webp"}
ALLOWED_UPLOAD_EXTS=ALLOWED_IMAGE_EXTS|{".pdf"}
MIME_TYPES={".png":"image/png",".jpg":"image/jpeg",".jpeg":"image/jpeg",".gif":"image/gif",".webp":"image/webp",".pdf":"application/pdf"}
#Presentation input
MIN_SWIPE_DISTANCE=50
#Dashboard
RECENT_DOCTORS_LIMIT=3
FEATURED_BRANDS_LIMIT=4
