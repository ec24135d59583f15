from shortlinks.dao.base import UrlRecordBaseDAO


__all__ = [
    'UrlRecordBaseDAO',
]
