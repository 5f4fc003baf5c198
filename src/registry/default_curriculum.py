"""
Bundled default curriculum

Seed data for the anchor subject (Tin học, grades 6–9). Used when storage is
empty or unreadable, and by "reset to default". Other subjects start empty
and have no bundled default.
"""

import copy
from typing import Any

from config.settings import ANCHOR_SUBJECT
from src.schemas.curriculum import CURRICULUM_DATA_ADAPTER, CurriculumData


def _m(*codes: str) -> dict[str, dict[str, Any]]:
    return {code: {"selected": True, "reason": "", "type": "manual"} for code in codes}


_TIN_HOC: dict[str, list[dict[str, Any]]] = {
    "6": [
        {
            "topic": "Chủ đề 1. Máy tính và cộng đồng",
            "semester": 1,
            "lessons": [
                {
                    "id": "6101",
                    "title": "Bài 1. Thông tin và dữ liệu",
                    "yccd": [
                        "Nhận biết được sự khác nhau giữa thông tin và dữ liệu.",
                        "Nêu được ví dụ minh hoạ tầm quan trọng của thông tin.",
                    ],
                    "mappings": _m("1.1.TC1a"),
                },
                {
                    "id": "6102",
                    "title": "Bài 2. Xử lí thông tin",
                    "yccd": [
                        "Nêu được các bước cơ bản trong xử lí thông tin.",
                        "Giải thích được máy tính là công cụ hiệu quả để thu thập, lưu trữ, xử lí và truyền thông tin.",
                    ],
                    "mappings": {},
                },
                {
                    "id": "6103",
                    "title": "Bài 3. Thông tin trong máy tính",
                    "yccd": [
                        "Biết được bit là đơn vị nhỏ nhất trong lưu trữ thông tin.",
                        "Nêu được các đơn vị đo dung lượng thông tin.",
                    ],
                    "mappings": _m("1.3.TC1a"),
                },
            ],
        },
        {
            "topic": "Chủ đề 2. Mạng máy tính và Internet",
            "semester": 1,
            "lessons": [
                {
                    "id": "6201",
                    "title": "Bài 4. Mạng máy tính",
                    "yccd": [
                        "Nêu được khái niệm và lợi ích của mạng máy tính.",
                        "Nêu được ví dụ cụ thể về trường hợp mạng không dây tiện dụng hơn mạng có dây.",
                    ],
                    "mappings": _m("2.2.TC1a"),
                },
                {
                    "id": "6202",
                    "title": "Bài 5. Internet",
                    "yccd": ["Trình bày được khái niệm sơ lược và một số đặc điểm chính của Internet."],
                    "mappings": {},
                },
                {
                    "id": "6203",
                    "title": "Kiểm tra giữa học kì I",
                    "yccd": ["Đánh giá kiến thức chủ đề 1 và 2."],
                    "mappings": {},
                    "periods": 1,
                },
            ],
        },
        {
            "topic": "Chủ đề 3. Tổ chức lưu trữ, tìm kiếm và trao đổi thông tin",
            "semester": 2,
            "lessons": [
                {
                    "id": "6301",
                    "title": "Bài 6. Mạng thông tin toàn cầu",
                    "yccd": ["Trình bày được khái niệm World Wide Web, website, địa chỉ website, trình duyệt."],
                    "mappings": _m("1.1.TC1a"),
                },
                {
                    "id": "6302",
                    "title": "Bài 7. Tìm kiếm thông tin trên Internet",
                    "yccd": [
                        "Xác định được từ khoá ứng với mục đích tìm kiếm cho trước.",
                        "Thực hiện được việc tìm kiếm thông tin trên Internet.",
                    ],
                    "mappings": _m("1.1.TC1b", "1.2.TC1a"),
                },
                {
                    "id": "6303",
                    "title": "Bài 8. Thư điện tử",
                    "yccd": ["Thực hiện được các thao tác đăng kí, đăng nhập, soạn, gửi và nhận thư điện tử."],
                    "mappings": _m("2.1.TC1a", "2.5.TC1a"),
                },
            ],
        },
        {
            "topic": "Chủ đề 4. Đạo đức, pháp luật và văn hoá trong môi trường số",
            "semester": 2,
            "lessons": [
                {
                    "id": "6401",
                    "title": "Bài 9. An toàn thông tin trên Internet",
                    "yccd": [
                        "Nêu được một số tác hại và nguy cơ bị hại khi tham gia Internet.",
                        "Bảo vệ được thông tin và tài khoản cá nhân.",
                    ],
                    "mappings": _m("4.2.TC1a", "4.3.TC1a"),
                },
            ],
        },
    ],
    "7": [
        {
            "topic": "Chủ đề 1. Máy tính và cộng đồng",
            "semester": 1,
            "lessons": [
                {
                    "id": "7101",
                    "title": "Bài 1. Thiết bị vào - ra",
                    "yccd": ["Nhận biết được thiết bị vào - ra trong mô hình thiết bị máy tính."],
                    "mappings": _m("5.1.TC1a"),
                },
                {
                    "id": "7102",
                    "title": "Bài 2. Phần mềm máy tính",
                    "yccd": ["Giải thích được chức năng điều khiển của hệ điều hành."],
                    "mappings": {},
                },
                {
                    "id": "7103",
                    "title": "Bài 3. Quản lí dữ liệu trong máy tính",
                    "yccd": ["Thao tác thành thạo với tệp và thư mục."],
                    "mappings": _m("1.3.TC1a"),
                },
            ],
        },
        {
            "topic": "Chủ đề 2. Tổ chức lưu trữ, tìm kiếm và trao đổi thông tin",
            "semester": 1,
            "lessons": [
                {
                    "id": "7201",
                    "title": "Bài 4. Mạng xã hội và một số kênh trao đổi thông tin",
                    "yccd": ["Nêu được một số chức năng cơ bản của mạng xã hội."],
                    "mappings": _m("2.5.TC1a", "2.6.TC1a"),
                },
            ],
        },
        {
            "topic": "Chủ đề 3. Ứng dụng tin học",
            "semester": 2,
            "lessons": [
                {
                    "id": "7301",
                    "title": "Bài 5. Làm quen với phần mềm bảng tính",
                    "yccd": ["Nêu được một số chức năng cơ bản của phần mềm bảng tính."],
                    "mappings": {},
                },
                {
                    "id": "7302",
                    "title": "Bài 6. Tạo bài trình chiếu",
                    "yccd": ["Tạo được bài trình chiếu có tiêu đề, cấu trúc phân cấp."],
                    "mappings": _m("3.1.TC1a", "3.3.TC1a"),
                },
            ],
        },
    ],
    "8": [
        {
            "topic": "Chủ đề 1. Máy tính và cộng đồng",
            "semester": 1,
            "lessons": [
                {
                    "id": "8101",
                    "title": "Bài 1. Lược sử công cụ tính toán",
                    "yccd": ["Trình bày được sơ lược lịch sử phát triển máy tính."],
                    "mappings": {},
                },
            ],
        },
        {
            "topic": "Chủ đề 2. Tổ chức lưu trữ, tìm kiếm và trao đổi thông tin",
            "semester": 1,
            "lessons": [
                {
                    "id": "8201",
                    "title": "Bài 2. Thông tin trong môi trường số",
                    "yccd": [
                        "Nêu được các đặc điểm của thông tin số.",
                        "Trình bày được tầm quan trọng của việc biết khai thác các nguồn thông tin đáng tin cậy.",
                    ],
                    "mappings": _m("1.2.TC2a"),
                },
                {
                    "id": "8202",
                    "title": "Bài 3. Thực hành: Khai thác thông tin số",
                    "yccd": ["Sử dụng được công cụ tìm kiếm, xử lí và trao đổi thông tin trong môi trường số."],
                    "mappings": _m("1.1.TC2a", "1.1.TC2b"),
                },
            ],
        },
        {
            "topic": "Chủ đề 5. Giải quyết vấn đề với sự trợ giúp của máy tính",
            "semester": 2,
            "lessons": [
                {
                    "id": "8501",
                    "title": "Bài 13. Biểu diễn dữ liệu",
                    "yccd": ["Giải thích được khái niệm hằng, biến, kiểu dữ liệu, biểu thức."],
                    "mappings": _m("3.4.TC2a"),
                },
                {
                    "id": "8502",
                    "title": "Bài 14. Cấu trúc điều khiển",
                    "yccd": ["Mô tả được kịch bản đơn giản dưới dạng thuật toán và tạo được chương trình."],
                    "mappings": _m("3.4.TC2a", "5.2.TC2a"),
                },
            ],
        },
    ],
    "9": [
        {
            "topic": "Chủ đề 1. Máy tính và cộng đồng",
            "semester": 1,
            "lessons": [
                {
                    "id": "9101",
                    "title": "Bài 1. Thế giới kĩ thuật số",
                    "yccd": ["Nhận biết được sự có mặt của các thiết bị có gắn bộ xử lí thông tin."],
                    "mappings": _m("6.1.TC2a"),
                },
            ],
        },
        {
            "topic": "Chủ đề 3. Đạo đức, pháp luật và văn hoá trong môi trường số",
            "semester": 1,
            "lessons": [
                {
                    "id": "9301",
                    "title": "Bài 4. Một số vấn đề pháp lí về sử dụng dịch vụ Internet",
                    "yccd": ["Trình bày được một số vấn đề nảy sinh về pháp lí, đạo đức, văn hoá khi sử dụng Internet."],
                    "mappings": _m("3.3.TC2a", "4.2.TC2a"),
                },
            ],
        },
        {
            "topic": "Chủ đề 4. Ứng dụng tin học",
            "semester": 2,
            "lessons": [
                {
                    "id": "9401",
                    "title": "Bài 5. Tìm hiểu phần mềm mô phỏng",
                    "yccd": ["Nêu được ví dụ phần mềm mô phỏng và kiến thức thu nhận được."],
                    "mappings": _m("5.3.TC2a"),
                },
                {
                    "id": "9402",
                    "title": "Kiểm tra cuối học kì II",
                    "yccd": ["Đánh giá tổng hợp kiến thức năm học."],
                    "mappings": {},
                },
            ],
        },
    ],
}


BUNDLED_DEFAULTS: dict[str, dict[str, list[dict[str, Any]]]] = {
    ANCHOR_SUBJECT: _TIN_HOC,
}


def has_bundled_default(subject: str) -> bool:
    return subject in BUNDLED_DEFAULTS


def default_curriculum(subject: str = ANCHOR_SUBJECT) -> CurriculumData:
    """Fresh, validated copy of the bundled default for ``subject``."""
    if subject not in BUNDLED_DEFAULTS:
        raise KeyError(f"No bundled default curriculum for {subject}")
    return CURRICULUM_DATA_ADAPTER.validate_python(copy.deepcopy(BUNDLED_DEFAULTS[subject]))
