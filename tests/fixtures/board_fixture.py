"""Sample BusTracker arrival-board pages."""

HASH_BOARD_HTML = (
    "<html>\r\n<head><title>Bus Tracker</title></head>\r\n<body>\r\n"
    '<div class="arrivals">\r\n'
    "##&nbsp;&nbsp;#28&nbsp;&nbsp;UCSB North Hall&nbsp;&nbsp;&nbsp;19 MIN<br>\r\n\r\n"
    "##&nbsp;&nbsp;#11&nbsp;&nbsp;Downtown SB&nbsp;&nbsp;APPROACHING<br>\r\n"
    "##&nbsp;&nbsp;#24X&nbsp;&nbsp;UCSB / Camino Real Mkt&nbsp;&nbsp;5 MIN<br>\r\n"
    "##&nbsp;&nbsp;#27&nbsp;&nbsp;Isla Vista&nbsp;&nbsp;DUE<br>\r\n"
    "</div>\r\n</body>\r\n</html>\r\n"
)

TABLE_BOARD_HTML = (
    "<html>\n<body>\n<table>\n"
    "<tr><td>28</td><td>UCSB North Hall</td><td>12 MIN</td></tr>\n"
    "<tr><td>11</td><td>Downtown &amp; Transit Center</td><td>Due</td></tr>\n"
    "<tr><td>6</td><td>Goleta Old Town</td><td>3 MINUTES</td></tr>\n"
    "</table>\n</body>\n</html>\n"
)

NO_BUSES_HTML = (
    "<html>\n<body>\n"
    "<div class='banner'>No arrival times available for this stop at this time.</div>\n"
    "</body>\n</html>\n"
)
