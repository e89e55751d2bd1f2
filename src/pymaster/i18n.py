from __future__ import annotations

STRINGS: dict[str, dict[str, str]] = {
    "welcome": {
        "en": "PyMaster: ready to conquer Python?\nSend your student code to begin.",
        "vi": "PyMaster: sẵn sàng chinh phục Python chưa?\nGửi mã học sinh của bạn để bắt đầu.",
    },
    "code_too_short": {"en": "The student code needs at least 3 characters.", "vi": "Mã số cần ít nhất 3 ký tự nha!"},
    "choose_topic": {"en": "Choose a practice topic:", "vi": "Chọn chủ đề ôn tập:"},
    "topic_sequential": {"en": "Sequential", "vi": "Tuần tự"},
    "topic_branching": {"en": "Branching", "vi": "Rẽ nhánh"},
    "topic_loop": {"en": "Loops", "vi": "Lặp"},
    "topic_combined": {"en": "Combined", "vi": "Tổng hợp"},
    "topic_sequential_desc": {"en": "Basic sequential programs", "vi": "Cấu trúc tuần tự cơ bản"},
    "topic_branching_desc": {"en": "if-else statements", "vi": "Câu lệnh if-else"},
    "topic_loop_desc": {"en": "for and while loops", "vi": "Vòng lặp for và while"},
    "topic_combined_desc": {"en": "Mixed exercises", "vi": "Bài tập tổng hợp"},
    "topic_placeholder": {"en": "Exercise about {topic}", "vi": "Bài tập về {topic}"},
    "loading_question": {"en": "Fetching a new question...", "vi": "Đang lấy câu hỏi mới..."},
    "question_header": {"en": "Question {n}/{total} · Score {score}", "vi": "Câu hỏi {n}/{total} · Điểm {score}"},
    "expected_output": {"en": "Expected output:", "vi": "Kết quả mong đợi:"},
    "hint": {"en": "Hint:", "vi": "Gợi ý:"},
    "no_hint": {"en": "No hint for this question.", "vi": "Câu này không có gợi ý."},
    "editor_help": {
        "en": "Send your code line by line; indentation after ':' is added for you.",
        "vi": "Gửi mã từng dòng; thụt lề sau dấu ':' sẽ được thêm tự động.",
    },
    "draft_header": {"en": "main.py", "vi": "main.py"},
    "draft_empty": {"en": "# Write your Python code here...", "vi": "# Viết mã Python của bạn ở đây..."},
    "evaluating": {"en": "Checking your code...", "vi": "Đang chấm bài..."},
    "empty_input": {
        "en": "You have not entered any code yet. Try writing something!",
        "vi": "Bạn chưa nhập mã lệnh nào cả. Hãy thử viết gì đó nhé!",
    },
    "offline_correct": {"en": "Correct! (checked offline)", "vi": "Chính xác! (Chấm Offline)"},
    "offline_wrong": {
        "en": "The logic does not match the task yet. Check it again!",
        "vi": "Chưa đúng logic yêu cầu. Kiểm tra lại nhé!",
    },
    "online_default_wrong": {"en": "Not correct yet.", "vi": "Chưa chính xác."},
    "service_busy": {
        "en": "The grading service is busy (API quota reached). Please try again later.",
        "vi": "Hệ thống đang bận (Hết lượt dùng API). Vui lòng thử lại sau.",
    },
    "question_expired": {
        "en": "This question can no longer be checked. Please skip it.",
        "vi": "Câu hỏi này không còn chấm được. Hãy bỏ qua câu này nhé.",
    },
    "verdict_correct": {"en": "✅ Correct", "vi": "✅ Chính xác"},
    "verdict_wrong": {"en": "❌ Not correct", "vi": "❌ Chưa đúng"},
    "output": {"en": "Output:", "vi": "Kết quả:"},
    "btn_tab": {"en": "⇥ Tab", "vi": "⇥ Tab"},
    "btn_dedent": {"en": "⇤ Dedent", "vi": "⇤ Lùi lề"},
    "btn_clear": {"en": "🗑 Clear", "vi": "🗑 Xoá"},
    "btn_run": {"en": "▶️ Run", "vi": "▶️ Chạy"},
    "btn_hint": {"en": "💡 Hint", "vi": "💡 Gợi ý"},
    "btn_skip": {"en": "⏭ Skip", "vi": "⏭ Bỏ qua"},
    "btn_finish": {"en": "🏁 Finish", "vi": "🏁 Kết thúc"},
    "btn_next": {"en": "➡️ Next", "vi": "➡️ Câu tiếp"},
    "btn_retry": {"en": "🔁 Edit code", "vi": "🔁 Sửa code"},
    "btn_restart": {"en": "🔄 Practice again", "vi": "🔄 Làm lại"},
    "skip_solved": {
        "en": "You already solved this one, press Next.",
        "vi": "Bạn đã làm đúng câu này, hãy bấm Câu tiếp.",
    },
    "no_session": {"en": "Send /start to begin.", "vi": "Gửi /start để bắt đầu."},
    "finished": {
        "en": "Student {code}: {score} correct out of {answered} answered.",
        "vi": "Học sinh {code}: đúng {score} trên {answered} câu đã làm.",
    },
    "title_excellent": {"en": "Excellent!", "vi": "Xuất sắc!"},
    "title_good": {"en": "Well done!", "vi": "Làm tốt lắm!"},
    "title_done": {"en": "Finished!", "vi": "Hoàn thành!"},
    "saved": {"en": "Result saved to the spreadsheet.", "vi": "Đã lưu kết quả vào Google Sheet."},
    "save_failed_missing": {"en": "Results spreadsheet is not configured.", "vi": "Chưa cấu hình URL Google Sheet."},
    "save_failed_sheet_link": {
        "en": "Wrong URL (a sheet link instead of the web app link).",
        "vi": "URL sai (Đang điền link Sheet thay vì link Web App).",
    },
    "save_failed_network": {"en": "Network error while saving.", "vi": "Lỗi kết nối mạng."},
    "csv_caption": {"en": "Your result as CSV.", "vi": "Kết quả của bạn (CSV)."},
}

def t(key: str, lang: str) -> str:
    return STRINGS.get(key, {}).get(lang, STRINGS.get(key, {}).get("en", key))
