from django.utils.html import format_html


def status_icon(status):
    match status:
        case "PENDING":
            return format_html(
                "<img src='/static/admin/img/icon-clock.svg' alt='Pending'>"
            )
        case "TRANSLATED" | True:
            return format_html(
                "<img src='/static/admin/img/icon-yes.svg' alt='Succeed'>"
            )
        case "FAILED" | False:
            return format_html("<img src='/static/admin/img/icon-no.svg' alt='Error'>")
        case _:
            return format_html(
                "<img src='/static/admin/img/icon-unknown.svg' alt='Unknown'>"
            )
