"""
Competency Registry

Fixed digital-competency (NLS) reference data for lower-secondary school.
Two registries are selected by grade band:

- TC1 (Trung cấp 1) for grades 6 and 7
- TC2 (Trung cấp 2) for grades 8 and 9

Codes follow ``<domain>.<competency>.<level><item>``.
"""

from src.schemas.curriculum import Competency


def _registry(rows: list[tuple[str, str]]) -> tuple[Competency, ...]:
    return tuple(Competency(code=code, text=text) for code, text in rows)


COMPETENCIES_TC1: tuple[Competency, ...] = _registry([
    # Miền 1: Khai thác dữ liệu và thông tin
    ("1.1.TC1a", "Xác định được nhu cầu thông tin, tìm kiếm dữ liệu, thông tin và nội dung trong môi trường số"),
    ("1.1.TC1b", "Sử dụng được từ khoá và bộ lọc để tìm kiếm thông tin phù hợp"),
    ("1.2.TC1a", "Phân tích, so sánh và đánh giá độ tin cậy của các nguồn dữ liệu, thông tin"),
    ("1.3.TC1a", "Tổ chức, lưu trữ và truy xuất dữ liệu, thông tin trong môi trường số"),
    # Miền 2: Giao tiếp và hợp tác
    ("2.1.TC1a", "Lựa chọn được công nghệ số phù hợp để tương tác trong bối cảnh cụ thể"),
    ("2.2.TC1a", "Chia sẻ dữ liệu, thông tin và nội dung số qua các công nghệ số phù hợp"),
    ("2.4.TC1a", "Sử dụng công cụ số để hợp tác, cùng xây dựng sản phẩm học tập"),
    ("2.5.TC1a", "Nhận biết và áp dụng các quy tắc ứng xử khi tham gia môi trường số"),
    ("2.6.TC1a", "Nhận biết và quản lý danh tính số của bản thân"),
    # Miền 3: Sáng tạo nội dung số
    ("3.1.TC1a", "Tạo và chỉnh sửa nội dung số ở các định dạng khác nhau"),
    ("3.2.TC1a", "Chỉnh sửa, tích hợp thông tin và nội dung để tạo nội dung mới"),
    ("3.3.TC1a", "Nhận biết và tôn trọng bản quyền, giấy phép đối với dữ liệu và nội dung số"),
    ("3.4.TC1a", "Viết được chuỗi lệnh đơn giản để giải quyết một nhiệm vụ cụ thể"),
    # Miền 4: An toàn
    ("4.1.TC1a", "Nhận biết rủi ro, mối đe doạ và áp dụng biện pháp bảo vệ thiết bị"),
    ("4.2.TC1a", "Bảo vệ dữ liệu cá nhân và quyền riêng tư trong môi trường số"),
    ("4.3.TC1a", "Phòng tránh rủi ro về sức khoẻ thể chất và tinh thần khi sử dụng công nghệ số"),
    ("4.4.TC1a", "Nhận biết tác động của công nghệ số tới môi trường"),
    # Miền 5: Giải quyết vấn đề
    ("5.1.TC1a", "Xác định và giải quyết các vấn đề kỹ thuật đơn giản khi sử dụng thiết bị số"),
    ("5.2.TC1a", "Xác định nhu cầu và lựa chọn công cụ số phù hợp để giải quyết vấn đề"),
    ("5.3.TC1a", "Sử dụng công nghệ số một cách sáng tạo để tạo ra tri thức"),
    ("5.4.TC1a", "Nhận biết những hạn chế về năng lực số của bản thân để tự cải thiện"),
    # Miền 6: Ứng dụng trí tuệ nhân tạo
    ("6.1.TC1a", "Nhận biết được các ứng dụng AI phổ biến trong đời sống"),
    ("6.2.TC1a", "Sử dụng được công cụ AI đơn giản để hỗ trợ học tập có hướng dẫn"),
    ("6.3.TC1a", "Nhận biết các vấn đề đạo đức, trách nhiệm khi sử dụng AI"),
])


COMPETENCIES_TC2: tuple[Competency, ...] = _registry([
    # Miền 1: Khai thác dữ liệu và thông tin
    ("1.1.TC2a", "Thực hiện tìm kiếm nâng cao, điều chỉnh chiến lược tìm kiếm theo mục đích"),
    ("1.1.TC2b", "Tổng hợp thông tin từ nhiều nguồn trong môi trường số"),
    ("1.2.TC2a", "Đánh giá tính xác thực của dữ liệu, nhận diện thông tin sai lệch"),
    ("1.3.TC2a", "Quản lý, tổ chức dữ liệu có cấu trúc bằng công cụ số"),
    # Miền 2: Giao tiếp và hợp tác
    ("2.1.TC2a", "Tương tác hiệu quả qua nhiều công nghệ số khác nhau"),
    ("2.3.TC2a", "Tham gia các hoạt động cộng đồng thông qua dịch vụ số công và tư"),
    ("2.4.TC2a", "Tổ chức làm việc nhóm trực tuyến, phân công và theo dõi tiến độ"),
    ("2.5.TC2a", "Điều chỉnh hành vi giao tiếp phù hợp với từng cộng đồng trực tuyến"),
    ("2.6.TC2a", "Xây dựng và bảo vệ hình ảnh, danh tiếng số của bản thân"),
    # Miền 3: Sáng tạo nội dung số
    ("3.1.TC2a", "Tạo nội dung số đa phương tiện phục vụ mục đích cụ thể"),
    ("3.2.TC2a", "Tích hợp, tinh chỉnh nội dung số sẵn có để tạo sản phẩm mới có giá trị"),
    ("3.3.TC2a", "Áp dụng đúng quy định bản quyền, trích dẫn nguồn khi sử dụng nội dung số"),
    ("3.4.TC2a", "Xây dựng chương trình có cấu trúc rẽ nhánh, lặp để giải quyết vấn đề"),
    # Miền 4: An toàn
    ("4.1.TC2a", "Thiết lập biện pháp bảo mật cho thiết bị và tài khoản"),
    ("4.2.TC2a", "Đánh giá chính sách quyền riêng tư và kiểm soát dữ liệu cá nhân được chia sẻ"),
    ("4.3.TC2a", "Cân bằng thời gian sử dụng thiết bị số, phòng chống bắt nạt trực tuyến"),
    ("4.4.TC2a", "Sử dụng công nghệ số tiết kiệm năng lượng, bảo vệ môi trường"),
    # Miền 5: Giải quyết vấn đề
    ("5.1.TC2a", "Chẩn đoán và khắc phục sự cố kỹ thuật thường gặp"),
    ("5.2.TC2a", "Đánh giá, lựa chọn giải pháp công nghệ phù hợp cho nhu cầu cụ thể"),
    ("5.3.TC2a", "Sử dụng công nghệ số để đổi mới quy trình, sản phẩm học tập"),
    ("5.4.TC2a", "Chủ động tìm kiếm cơ hội phát triển năng lực số của bản thân"),
    # Miền 6: Ứng dụng trí tuệ nhân tạo
    ("6.1.TC2a", "Giải thích được nguyên lý hoạt động cơ bản của hệ thống AI"),
    ("6.2.TC2a", "Sử dụng công cụ AI tạo sinh có kiểm chứng kết quả để hỗ trợ học tập"),
    ("6.3.TC2a", "Đánh giá tác động xã hội và sử dụng AI có trách nhiệm"),
])


def competencies_for_grade(grade: str) -> tuple[Competency, ...]:
    """Registry for a grade band: 6–7 → TC1, 8–9 → TC2."""
    return COMPETENCIES_TC1 if str(grade) in ("6", "7") else COMPETENCIES_TC2


def find_competency(code: str, grade: str) -> Competency | None:
    for competency in competencies_for_grade(grade):
        if competency.code == code:
            return competency
    return None


def competency_text(code: str, grade: str) -> str:
    competency = find_competency(code, grade)
    return competency.text if competency else ""
