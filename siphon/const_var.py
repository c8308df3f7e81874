import os
work_directory = os.getcwd()
code_message = {
    200: "OK",
    204: "No Content",
    301: "Moved Permanently",
    302: "Found",
    304: "Not Modified",
    307: "Temporary Redirect",
    400: "Bad Request",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allow",
    500: "Internal Server Error",
    503: "Service Unavailable"
}

### PAGES ###
PAGE_400 = "400 Bad Request"
PAGE_500 = "500 Internal Server Error"
NOT_FOUND_TEXT = "404 page not found"
WAT_PAGE = "<html><head><title>what?</title></head><body>looking for <em>{0}</em> ?</body>"

HOME_PATH = "/"
FORWARDED_FOR = "X-Forwarded-For"
